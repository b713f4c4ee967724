"""
Season and title parsing for remote folder names.

Parses patterns like:
- "Show Name S02"
- "Show.Name.S02E01.1080p.WEB-DL"
- "Show Name Season 2" / "Show Name 2nd Season"
- "剧名 第二季" / "剧名 第2季"
- "Movie Name (2020)" / "Movie Name [2020]"
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

logger = logging.getLogger(__name__)

_CHINESE_NUMERALS = {
    "一": 1, "二": 2, "三": 3, "四": 4, "五": 5,
    "六": 6, "七": 7, "八": 8, "九": 9, "十": 10,
}

_SEASON_PATTERNS = [
    # S02, S2E01, s02e10
    re.compile(r"(?<![A-Za-z0-9])S(\d{1,2})(?:E\d{1,4})?(?![A-Za-z0-9])", re.IGNORECASE),
    # Season 2, Season.02
    re.compile(r"\bSeason[\s._-]*(\d{1,2})\b", re.IGNORECASE),
    # 2nd Season
    re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)[\s._-]+Season\b", re.IGNORECASE),
    # 第2季
    re.compile(r"第\s*(\d{1,2})\s*[季部]"),
]

_CHINESE_SEASON_PATTERN = re.compile(r"第\s*([一二三四五六七八九十]{1,3})\s*[季部]")

_YEAR_BRACKETED = re.compile(r"[(\[（【]\s*((?:19|20)\d{2})\s*[)\]）】]")
_YEAR_BARE = re.compile(r"(?<![0-9])((?:19|20)\d{2})(?![0-9p])")

_QUALITY_TOKENS = re.compile(
    r"\b(2160p|1080p|720p|480p|4K|UHD|HDR10?|WEB-?DL|WEB-?Rip|BluRay|BDRip|"
    r"HDTV|REMUX|x26[45]|H\.?26[45]|HEVC|AAC|DTS|FLAC|DDP?5\.1)\b",
    re.IGNORECASE,
)
_BRACKETED_TAG = re.compile(r"[\[【][^\]】]*[\]】]")
_SEPARATORS = re.compile(r"[._]+")
_WHITESPACE = re.compile(r"\s+")


@dataclass
class SeasonInfo:
    """Result of parsing a folder name."""

    clean_title: str
    season_number: Optional[int] = None
    year: Optional[int] = None


def chinese_numeral_to_int(text: str) -> Optional[int]:
    """Convert a Chinese numeral between one and ninety-nine to an int."""
    if not text:
        return None
    if len(text) == 1:
        return _CHINESE_NUMERALS.get(text)
    if text[0] == "十":
        # 十一 .. 十九
        units = _CHINESE_NUMERALS.get(text[1:], 0) if len(text) == 2 else None
        return 10 + units if units is not None else None
    if len(text) >= 2 and text[1] == "十":
        tens = _CHINESE_NUMERALS.get(text[0])
        if tens is None or tens == 10:
            return None
        units = _CHINESE_NUMERALS.get(text[2:], 0) if len(text) == 3 else 0
        return tens * 10 + units
    return None


def _extract_season(name: str) -> tuple[Optional[int], str]:
    """Return the season number and the name with the marker removed."""
    for pattern in _SEASON_PATTERNS:
        match = pattern.search(name)
        if match:
            season = int(match.group(1))
            return season, name[: match.start()] + " " + name[match.end():]

    match = _CHINESE_SEASON_PATTERN.search(name)
    if match:
        season = chinese_numeral_to_int(match.group(1))
        if season is not None:
            return season, name[: match.start()] + " " + name[match.end():]

    return None, name


def _extract_year(name: str) -> tuple[Optional[int], str]:
    """Return the release year hint and the name with it removed."""
    match = _YEAR_BRACKETED.search(name)
    if not match:
        match = _YEAR_BARE.search(name)
        # A title that is only a year ("1917") keeps it as the title
        if match and not name[: match.start()].strip(" ._-"):
            return None, name
        # "Blade Runner 2049" is a title, not a release year
        if match and int(match.group(1)) > datetime.now().year + 1:
            return None, name
    if match:
        return int(match.group(1)), name[: match.start()] + " " + name[match.end():]
    return None, name


def parse_season_from_title(name: str) -> SeasonInfo:
    """
    Parse a folder name into a search-friendly title, season and year.

    Args:
        name: Raw folder name.

    Returns:
        SeasonInfo. ``clean_title`` falls back to the stripped raw name
        when cleanup leaves nothing.
    """
    season, remainder = _extract_season(name)
    year, remainder = _extract_year(remainder)

    remainder = _BRACKETED_TAG.sub(" ", remainder)
    remainder = _QUALITY_TOKENS.sub(" ", remainder)
    remainder = _SEPARATORS.sub(" ", remainder)
    clean_title = _WHITESPACE.sub(" ", remainder).strip(" -–:")

    if not clean_title:
        clean_title = name.strip()

    logger.debug(f"Parsed {name!r}: title={clean_title!r}, season={season}, year={year}")
    return SeasonInfo(clean_title=clean_title, season_number=season, year=year)
