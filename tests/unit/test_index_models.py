"""
Unit tests for the index data model.
"""

import json

import pytest

from openshelf.index.models import FolderInfo, MetaInfo
from tests.fixtures.factories import FolderInfoFactory, MetaInfoFactory


@pytest.mark.unit
class TestFolderInfo:
    """Tests for FolderInfo."""

    def test_placeholder(self):
        """Test placeholder entries for unmatched folders."""
        info = FolderInfo.placeholder("Movie B (2020)")

        assert info.failed is True
        assert info.tmdb_id == 0
        assert info.overview == ""
        assert info.title == "Movie B (2020)"
        assert info.media_type == "movie"
        assert info.poster_path is None
        assert info.release_date == ""
        assert info.vote_average == 0

    def test_to_dict_layout(self):
        """Test the persisted key names and order."""
        info = FolderInfoFactory.create("Movie A", tmdb_id=42, last_updated=1)
        data = info.to_dict()

        assert list(data) == [
            "folderName", "tmdb_id", "title", "poster_path", "release_date",
            "overview", "vote_average", "media_type", "last_updated", "failed",
        ]
        assert data["folderName"] == "Movie A"
        assert data["tmdb_id"] == 42

    def test_to_dict_includes_season(self):
        info = FolderInfoFactory.create(
            "Show A S02", media_type="tv", season_number=2, season_name="Season 2"
        )
        data = info.to_dict()

        assert data["season_number"] == 2
        assert data["season_name"] == "Season 2"

    def test_from_dict_round_trip(self):
        info = FolderInfoFactory.create("Show A S02", media_type="tv", season_number=2)

        assert FolderInfo.from_dict(info.to_dict()) == info

    def test_from_dict_requires_folder_name(self):
        with pytest.raises(ValueError):
            FolderInfo.from_dict({"tmdb_id": 1})

    def test_from_dict_failed_entry_has_no_identity(self):
        """Test a failed entry never carries a TMDB id."""
        info = FolderInfo.from_dict({
            "folderName": "X",
            "tmdb_id": 99,
            "overview": "stale",
            "failed": True,
        })

        assert info.failed is True
        assert info.tmdb_id == 0
        assert info.overview == ""

    def test_from_dict_missing_optional_fields(self):
        """Test documents written by older versions."""
        info = FolderInfo.from_dict({"folderName": "Old Entry"})

        assert info.title == "Old Entry"
        assert info.tmdb_id == 0
        assert info.season_number is None
        assert info.failed is False


@pytest.mark.unit
class TestMetaInfo:
    """Tests for MetaInfo."""

    def test_empty(self):
        meta_info = MetaInfo.empty()

        assert meta_info.folders == {}
        assert meta_info.last_refresh > 0

    def test_name_index_and_find_key(self):
        meta_info = MetaInfoFactory.create_for_names(["A", "B"])
        index = meta_info.name_index()

        assert set(index) == {"A", "B"}
        assert meta_info.find_key("A") == index["A"]
        assert meta_info.find_key("missing") is None

    def test_failed_count(self):
        meta_info = MetaInfoFactory.create([
            FolderInfoFactory.create("A"),
            FolderInfo.placeholder("B"),
        ])

        assert meta_info.failed_count == 1

    def test_json_round_trip(self):
        meta_info = MetaInfoFactory.create([
            FolderInfoFactory.create("电影 (2020)"),
            FolderInfo.placeholder("Unknown"),
        ])
        content = meta_info.to_json()

        # Non-ASCII names are stored as-is
        assert "电影" in content
        assert MetaInfo.from_json(content) == meta_info

    def test_from_dict_skips_malformed_entries(self):
        data = {
            "folders": {
                "good": {"folderName": "Good", "tmdb_id": 1},
                "no-name": {"tmdb_id": 2},
                "not-a-dict": "oops",
            },
            "last_refresh": 1700000000000,
        }

        meta_info = MetaInfo.from_dict(data)

        assert list(meta_info.folders) == ["good"]
        assert meta_info.last_refresh == 1700000000000

    def test_from_dict_without_folders(self):
        meta_info = MetaInfo.from_dict({})

        assert meta_info.folders == {}

    def test_from_json_rejects_non_object(self):
        with pytest.raises(ValueError):
            MetaInfo.from_json(json.dumps([1, 2, 3]))

    def test_from_json_rejects_invalid_json(self):
        # json.JSONDecodeError is a ValueError
        with pytest.raises(ValueError):
            MetaInfo.from_json("{not json")
