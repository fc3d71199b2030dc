"""JSON file blob store: one file per storage key."""

import os
from pathlib import Path

from loan_ledger.exceptions import PersistenceError
from loan_ledger.logging import get_logger
from loan_ledger.persistence.base import BlobStore

logger = get_logger(__name__)


class JsonFileBlobStore(BlobStore):
    """Persist snapshot blobs as ``<key>.json`` files in a directory."""

    def __init__(self, data_dir: str | Path) -> None:
        """Initialize JSON file blob store.

        Parameters
        ----------
        data_dir : str | Path
            Directory holding the snapshot files. Created on first write.
        """
        self.data_dir = Path(data_dir)

    def path_for(self, key: str) -> Path:
        """Get the file backing ``key``."""
        return self.data_dir / f"{key}.json"

    def read(self, key: str) -> str | None:
        file_path = self.path_for(key)
        if not file_path.exists():
            return None
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as exc:
            raise PersistenceError(f"Cannot read {file_path}: {exc}") from exc

    def write(self, key: str, blob: str) -> None:
        file_path = self.path_for(key)
        tmp_path = file_path.with_suffix(".json.tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(blob)
            os.replace(tmp_path, file_path)
        except OSError as exc:
            raise PersistenceError(f"Cannot write {file_path}: {exc}") from exc
        logger.debug("Wrote %d bytes to %s", len(blob), file_path)
