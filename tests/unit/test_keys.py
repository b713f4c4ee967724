"""
Unit tests for folder key generation.
"""

import hashlib

import pytest

from openshelf.index.keys import KEY_LENGTH, generate_folder_key


@pytest.mark.unit
class TestGenerateFolderKey:
    """Tests for generate_folder_key."""

    def test_key_is_hash_prefix(self):
        """Test the key is the leading hex digits of the SHA-256 digest."""
        expected = hashlib.sha256("Movie B (2020)".encode("utf-8")).hexdigest()[:KEY_LENGTH]

        assert generate_folder_key("Movie B (2020)", set()) == expected

    def test_deterministic(self):
        """Test the same name and key set give the same key."""
        existing = {"aaaaaaaaaaaa"}

        assert generate_folder_key("Show A S02", existing) == generate_folder_key("Show A S02", existing)

    def test_unicode_names(self):
        """Test non-ASCII folder names."""
        key = generate_folder_key("剧名 第二季", set())

        assert len(key) == KEY_LENGTH
        assert all(c in "0123456789abcdef" for c in key)

    def test_collision_appends_suffix(self):
        """Test collisions get -1, -2 suffixes."""
        base = generate_folder_key("Show A S02", set())

        assert generate_folder_key("Show A S02", {base}) == f"{base}-1"
        assert generate_folder_key("Show A S02", {base, f"{base}-1"}) == f"{base}-2"

    def test_never_returns_existing_key(self):
        """Test the result is never in the existing set across a scan."""
        existing: set = set()
        names = [f"Folder {i}" for i in range(50)] + ["Folder 1", "Folder 1", "Folder 2"]

        for name in names:
            key = generate_folder_key(name, existing)
            assert key not in existing
            existing.add(key)

        assert len(existing) == len(names)
