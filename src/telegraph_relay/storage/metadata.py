"""Key-value bookkeeping for uploaded files."""

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Protocol

from telegraph_relay.config.settings import AppSettings
from telegraph_relay.logger import get_logger

logger = get_logger(__name__)


class MetadataStoreError(RuntimeError):
    """Raised when a metadata record cannot be written."""


@dataclass(slots=True)
class FileRecord:
    """Bookkeeping entry written once per successful upload."""

    file_id: str
    extension: str
    file_name: str
    file_size: int
    file_type: str
    timestamp_ms: int = field(default_factory=lambda: int(time.time() * 1000))
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def key(self) -> str:
        return f"{self.file_id}.{self.extension}"

    def to_metadata(self) -> dict[str, Any]:
        return {
            "TimeStamp": self.timestamp_ms,
            "ListType": "None",
            "Label": "None",
            "liked": False,
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "fileType": self.file_type,
            "uploadedAt": self.uploaded_at.isoformat(),
        }


class MetadataStore(Protocol):
    async def put(self, key: str, value: str, metadata: dict[str, Any]) -> None:
        ...


@dataclass(slots=True)
class InMemoryMetadataStore:
    """Dictionary-backed store, useful for tests and embedded use."""

    entries: dict[str, tuple[str, dict[str, Any]]] = field(default_factory=dict)

    async def put(self, key: str, value: str, metadata: dict[str, Any]) -> None:
        self.entries[key] = (value, dict(metadata))

    def get(self, key: str) -> Optional[tuple[str, dict[str, Any]]]:
        return self.entries.get(key)


@dataclass(slots=True)
class FileMetadataStore:
    """Store that writes one JSON document per key into a directory."""

    directory: Path

    def path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in {".", ".."}:
            raise MetadataStoreError(f"Invalid metadata key: {key!r}")
        return self.directory / f"{key}.json"

    async def put(self, key: str, value: str, metadata: dict[str, Any]) -> None:
        path = self.path_for(key)
        document = json.dumps({"value": value, "metadata": metadata}, ensure_ascii=False)
        try:
            await asyncio.to_thread(self._write, path, document)
        except OSError as exc:
            raise MetadataStoreError(f"Failed to write metadata for {key}: {exc}") from exc

    def get(self, key: str) -> Optional[tuple[str, dict[str, Any]]]:
        path = self.path_for(key)
        if not path.exists():
            return None
        document = json.loads(path.read_text(encoding="utf-8"))
        return document.get("value", ""), document.get("metadata", {})

    def _write(self, path: Path, document: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path.write_text(document, encoding="utf-8")


async def save_file_record(store: MetadataStore, record: FileRecord) -> None:
    await store.put(record.key, "", record.to_metadata())
    logger.debug("Recorded metadata for %s", record.key)


def build_metadata_store(settings: AppSettings) -> Optional[MetadataStore]:
    """Create the configured metadata store, or ``None`` when none is set."""

    if not settings.metadata_store_path:
        return None
    return FileMetadataStore(directory=Path(settings.metadata_store_path).expanduser())
