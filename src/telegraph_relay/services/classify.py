"""Map uploaded files to Telegram upload kinds."""

from telegraph_relay.clients.telegram import FileKind


def classify_file_kind(mime_type: str | None) -> FileKind:
    """Choose the Telegram upload method for a MIME type; never fails."""

    content_type = mime_type or ""
    if content_type.startswith("image/"):
        return FileKind.PHOTO
    if content_type.startswith("audio/"):
        return FileKind.AUDIO
    if content_type.startswith("video/"):
        return FileKind.VIDEO
    return FileKind.DOCUMENT


def file_extension(file_name: str) -> str:
    """Return the lower-cased text after the last dot, or the whole name."""

    return file_name.rsplit(".", 1)[-1].lower()
