"""Service layer modules for the Telegraph relay."""

from .classify import classify_file_kind, file_extension
from .file_id import extract_file_id
from .notification import (
    COPY_LINK_CALLBACK,
    FileNotificationInfo,
    NotificationPayload,
    build_notification,
    extract_link,
    file_icon,
    format_file_size,
    send_file_notification,
)
from .upload import (
    MissingFileId,
    NetworkError,
    NoFileUploaded,
    RelayError,
    UploadFailed,
    relay_upload,
)

__all__ = [
    "COPY_LINK_CALLBACK",
    "FileNotificationInfo",
    "MissingFileId",
    "NetworkError",
    "NoFileUploaded",
    "NotificationPayload",
    "RelayError",
    "UploadFailed",
    "build_notification",
    "classify_file_kind",
    "extract_file_id",
    "extract_link",
    "file_extension",
    "file_icon",
    "format_file_size",
    "relay_upload",
    "send_file_notification",
]
