"""Persistence adapters for ledger snapshots."""

from loan_ledger.persistence.base import BlobStore
from loan_ledger.persistence.json_file import JsonFileBlobStore
from loan_ledger.persistence.memory import InMemoryBlobStore
from loan_ledger.persistence.serialization import dumps_snapshot, loads_snapshot, snapshot_to_dict

__all__ = [
    "BlobStore",
    "InMemoryBlobStore",
    "JsonFileBlobStore",
    "dumps_snapshot",
    "loads_snapshot",
    "snapshot_to_dict",
]
