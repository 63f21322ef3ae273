"""Pick the canonical file identifier out of a Telegram send response."""

from typing import Any, Mapping, Optional

_SINGLE_FILE_FIELDS = ("document", "video", "audio")


def extract_file_id(response: Mapping[str, Any]) -> Optional[str]:
    """Return the stored file id, or ``None`` for an unexpected response shape.

    Photos come back as several resized variants; the largest ``file_size``
    wins, and on an exact tie the earlier entry is kept.
    """

    if not response.get("ok"):
        return None

    result = response.get("result")
    if not isinstance(result, Mapping):
        return None

    photos = result.get("photo")
    if photos:
        best: Optional[Mapping[str, Any]] = None
        for photo in photos:
            if not isinstance(photo, Mapping):
                continue
            if best is None or _size_of(photo) > _size_of(best):
                best = photo
        if best is not None and best.get("file_id"):
            return str(best["file_id"])

    for field_name in _SINGLE_FILE_FIELDS:
        entry = result.get(field_name)
        if isinstance(entry, Mapping) and entry.get("file_id"):
            return str(entry["file_id"])

    return None


def _size_of(photo: Mapping[str, Any]) -> int:
    size = photo.get("file_size")
    return size if isinstance(size, int) else 0
