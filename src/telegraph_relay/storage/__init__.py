"""Persistence for upload bookkeeping."""

from .metadata import (
    FileMetadataStore,
    FileRecord,
    InMemoryMetadataStore,
    MetadataStore,
    MetadataStoreError,
    build_metadata_store,
    save_file_record,
)

__all__ = [
    "FileMetadataStore",
    "FileRecord",
    "InMemoryMetadataStore",
    "MetadataStore",
    "MetadataStoreError",
    "build_metadata_store",
    "save_file_record",
]
