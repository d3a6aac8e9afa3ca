"""
Media Helpers

Video id extraction, embed and thumbnail URLs, and human-readable file sizes.
"""

import re
from typing import Any, Optional

YOUTUBE_PATTERNS = [
    re.compile(r'youtube\.com/watch\?v=([a-zA-Z0-9_-]+)'),
    re.compile(r'youtu\.be/([a-zA-Z0-9_-]+)'),
    re.compile(r'youtube\.com/embed/([a-zA-Z0-9_-]+)'),
    re.compile(r'youtube\.com/shorts/([a-zA-Z0-9_-]+)'),
]

VIMEO_PATTERNS = [
    re.compile(r'vimeo\.com/(\d+)'),
    re.compile(r'player\.vimeo\.com/video/(\d+)'),
]

_SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def detect_provider(url: Optional[str]) -> str:
    """Guess the video provider from a URL: youtube, vimeo, or "" when unknown."""
    if not url:
        return ""
    if "youtube.com" in url or "youtu.be" in url:
        return "youtube"
    if "vimeo.com" in url:
        return "vimeo"
    return ""


def _first_match(patterns, url: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def extract_video_id(url: Optional[str], provider: str = "") -> Optional[str]:
    """
    Extract the provider's video id from a URL.

    Args:
        url: Video page, short or embed URL
        provider: "youtube" or "vimeo"; detected from the URL when empty

    Returns:
        The video id, or None when the URL is not recognised
    """
    if not url:
        return None

    provider = provider or detect_provider(url)
    if provider == "youtube":
        return _first_match(YOUTUBE_PATTERNS, url)
    if provider == "vimeo":
        return _first_match(VIMEO_PATTERNS, url)
    return None


def get_video_embed_url(video_id: Optional[str], provider: str) -> Optional[str]:
    if not video_id:
        return None
    if provider == "youtube":
        return f"https://www.youtube.com/embed/{video_id}"
    if provider == "vimeo":
        return f"https://player.vimeo.com/video/{video_id}"
    return None


def get_video_thumbnail_url(video_id: Optional[str], provider: str, size: str = "hqdefault") -> Optional[str]:
    """Only YouTube exposes predictable thumbnail URLs; everything else has none."""
    if not video_id or provider != "youtube":
        return None
    return f"https://img.youtube.com/vi/{video_id}/{size}.jpg"


def format_file_size(value: Any) -> str:
    """
    Render a byte count as "2 MB". Strings that are not plain integers are
    assumed to be already formatted ("2.4 MB") and returned unchanged.
    """
    if value is None or value == "":
        return ""
    if isinstance(value, str):
        if not value.strip().isdigit():
            return value.strip()
        value = int(value.strip())

    size = float(value)
    unit = 0
    while size >= 1024 and unit < len(_SIZE_UNITS) - 1:
        size /= 1024
        unit += 1
    return f"{round(size)} {_SIZE_UNITS[unit]}"
