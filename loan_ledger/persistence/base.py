"""Blob store interface for persisting ledger snapshots."""

from abc import ABC, abstractmethod


class BlobStore(ABC):
    """String-keyed store holding whole snapshot blobs.

    Writes overwrite the previous blob for the key; there is no versioning,
    so the last writer wins.
    """

    @abstractmethod
    def read(self, key: str) -> str | None:
        """Return the blob stored under ``key``, or None when there is none.

        Raises
        ------
        PersistenceError
            If the underlying storage cannot be read.
        """

    @abstractmethod
    def write(self, key: str, blob: str) -> None:
        """Replace the blob stored under ``key``.

        Raises
        ------
        PersistenceError
            If the underlying storage cannot be written.
        """
