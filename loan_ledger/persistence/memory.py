"""In-memory blob store for tests and embedding."""

from loan_ledger.persistence.base import BlobStore


class InMemoryBlobStore(BlobStore):
    """Keep blobs in a dict for the lifetime of the process."""

    def __init__(self, blobs: dict[str, str] | None = None) -> None:
        self.blobs: dict[str, str] = dict(blobs or {})
        self.write_count = 0

    def read(self, key: str) -> str | None:
        return self.blobs.get(key)

    def write(self, key: str, blob: str) -> None:
        self.blobs[key] = blob
        self.write_count += 1
