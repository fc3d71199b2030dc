"""Configuration management for loan-ledger."""

from dataclasses import dataclass, field
from pathlib import Path

from loan_ledger.exceptions import ConfigurationError

DEFAULT_STORAGE_KEY = "loanSystemData"
LOG_FORMATS = ("standard", "json")


@dataclass
class StorageConfig:
    """Where and how the ledger snapshot is persisted."""

    data_dir: Path = field(default_factory=lambda: Path("data"))
    storage_key: str = DEFAULT_STORAGE_KEY
    pretty_json: bool = False

    @property
    def snapshot_path(self) -> Path:
        """Get the file holding the snapshot blob."""
        return self.data_dir / f"{self.storage_key}.json"


@dataclass
class LedgerConfig:
    """Main configuration for loan-ledger."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    log_level: str = "INFO"
    log_format: str = "standard"
    seed: int | None = None

    def validate(self) -> None:
        """Reject values the ledger cannot work with."""
        if not self.storage.storage_key.strip():
            raise ConfigurationError("Storage key must not be empty")
        if self.log_format not in LOG_FORMATS:
            raise ConfigurationError(
                f"Unknown log format {self.log_format!r}, expected one of {LOG_FORMATS}"
            )

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        """Create config from environment variables."""
        import os

        storage = StorageConfig(
            data_dir=Path(os.getenv("LOAN_LEDGER_DATA_DIR", "data")),
            storage_key=os.getenv("LOAN_LEDGER_STORAGE_KEY", DEFAULT_STORAGE_KEY),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        seed_str = os.getenv("SEED")
        try:
            seed = int(seed_str) if seed_str else None
        except ValueError as exc:
            raise ConfigurationError(f"SEED must be an integer, got {seed_str!r}") from exc

        config = cls(
            storage=storage,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
            seed=seed,
        )
        config.validate()
        return config
