# reel_recipes/services/ids.py
from typing import Literal, Optional

from .errors import ValidationError

Platform = Literal["tiktok", "instagram"]

_TIKTOK_MARKERS = ("tiktok.com",)
_INSTAGRAM_MARKERS = ("instagram.com/reel", "instagram.com/p/")


def detect_platform(url: str) -> Optional[Platform]:
    """Return the video platform, or None when the URL is not supported."""
    candidate = url.strip().lower()
    if any(marker in candidate for marker in _TIKTOK_MARKERS):
        return "tiktok"
    if any(marker in candidate for marker in _INSTAGRAM_MARKERS):
        return "instagram"
    return None


def validate_video_url(url: Optional[str]) -> Platform:
    if not url or not url.strip():
        raise ValidationError("Please paste a video URL")
    platform = detect_platform(url)
    if platform is None:
        raise ValidationError("Please use a TikTok or Instagram URL")
    return platform
