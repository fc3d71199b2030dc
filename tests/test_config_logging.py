"""Tests for config and logging."""

import io
import json
import logging
import sys
from decimal import Decimal
from pathlib import Path

import pytest

from loan_ledger.config import DEFAULT_STORAGE_KEY, LedgerConfig, StorageConfig
from loan_ledger.exceptions import ConfigurationError
from loan_ledger.issuance import LoanRequest
from loan_ledger.logging import JsonFormatter, get_logger, setup_logging
from loan_ledger.models import RepaymentPeriod

ENV_VARS = [
    "LOAN_LEDGER_DATA_DIR",
    "LOAN_LEDGER_STORAGE_KEY",
    "PRETTY_JSON",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "SEED",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable LedgerConfig.from_env reads."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestStorageConfig:
    """Tests for StorageConfig."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = StorageConfig()

        assert config.data_dir == Path("data")
        assert config.storage_key == "loanSystemData"
        assert config.pretty_json is False

    def test_snapshot_path(self) -> None:
        """Test the snapshot file location."""
        config = StorageConfig(data_dir=Path("/tmp/ledger"), storage_key="branch-2")

        assert config.snapshot_path == Path("/tmp/ledger/branch-2.json")


class TestLedgerConfig:
    """Tests for LedgerConfig."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = LedgerConfig()

        assert isinstance(config.storage, StorageConfig)
        assert config.log_level == "INFO"
        assert config.log_format == "standard"
        assert config.seed is None

    def test_from_env_default(self, clean_env) -> None:
        """Test creating config from environment with defaults."""
        config = LedgerConfig.from_env()

        assert config.storage.data_dir == Path("data")
        assert config.storage.storage_key == DEFAULT_STORAGE_KEY
        assert config.storage.pretty_json is False
        assert config.seed is None

    def test_from_env_custom(self, clean_env) -> None:
        """Test creating config from custom environment variables."""
        clean_env.setenv("LOAN_LEDGER_DATA_DIR", "/var/lib/ledger")
        clean_env.setenv("LOAN_LEDGER_STORAGE_KEY", "branch-2")
        clean_env.setenv("PRETTY_JSON", "TRUE")
        clean_env.setenv("LOG_LEVEL", "DEBUG")
        clean_env.setenv("LOG_FORMAT", "json")
        clean_env.setenv("SEED", "12345")

        config = LedgerConfig.from_env()

        assert config.storage.data_dir == Path("/var/lib/ledger")
        assert config.storage.storage_key == "branch-2"
        assert config.storage.pretty_json is True
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        assert config.seed == 12345

    def test_from_env_bad_seed(self, clean_env) -> None:
        """Test a non-integer SEED is rejected."""
        clean_env.setenv("SEED", "forty-two")

        with pytest.raises(ConfigurationError, match="SEED"):
            LedgerConfig.from_env()

    def test_from_env_bad_format(self, clean_env) -> None:
        """Test an unknown LOG_FORMAT is rejected."""
        clean_env.setenv("LOG_FORMAT", "xml")

        with pytest.raises(ConfigurationError, match="log format"):
            LedgerConfig.from_env()

    def test_empty_storage_key_rejected(self) -> None:
        """Test validate() rejects a blank storage key."""
        config = LedgerConfig(storage=StorageConfig(storage_key="  "))

        with pytest.raises(ConfigurationError):
            config.validate()


@pytest.mark.usefixtures("restore_logging")
class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default(self) -> None:
        """Test default logging setup."""
        setup_logging()

        assert logging.getLogger("loan_ledger").level == logging.INFO

    def test_setup_logging_debug(self) -> None:
        """Test debug level logging setup."""
        setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_invalid_level(self) -> None:
        """Test logging with invalid level defaults to INFO."""
        setup_logging(level="INVALID")

        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_json_format(self) -> None:
        """Test JSON format logging."""
        setup_logging(format_type="json")

        assert any(isinstance(h.formatter, JsonFormatter) for h in logging.getLogger().handlers)

    def test_setup_logging_replaces_handlers(self) -> None:
        """Test that setup_logging replaces existing handlers."""
        logger = logging.getLogger()
        logger.addHandler(logging.StreamHandler())
        logger.addHandler(logging.StreamHandler())

        setup_logging()

        assert len(logger.handlers) == 1

    def test_custom_stream(self) -> None:
        """Test log lines go to the given stream."""
        stream = io.StringIO()
        setup_logging(stream=stream)

        get_logger("loan_ledger.test").info("Issued loan %s", "Acme_Ln_001")

        assert "Issued loan Acme_Ln_001" in stream.getvalue()

    def test_faker_logger_quieted(self) -> None:
        """Test that Faker's logger is quieted."""
        setup_logging(level="DEBUG")

        assert logging.getLogger("faker").level == logging.WARNING


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    @staticmethod
    def _record(**kwargs) -> logging.LogRecord:
        defaults = dict(
            name="test.logger",
            level=logging.INFO,
            pathname="/path/to/file.py",
            lineno=42,
            msg="Test message",
            args=(),
            exc_info=None,
        )
        defaults.update(kwargs)
        return logging.LogRecord(**defaults)

    def test_format_basic(self) -> None:
        """Test basic log formatting."""
        data = json.loads(JsonFormatter().format(self._record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "test.logger"
        assert data["message"] == "Test message"
        assert "timestamp" in data

    def test_format_with_exception(self) -> None:
        """Test formatting with exception info."""
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(
            JsonFormatter().format(self._record(level=logging.ERROR, exc_info=exc_info))
        )

        assert data["level"] == "ERROR"
        assert "ValueError" in data["exception"]

    def test_format_with_ledger_context(self) -> None:
        """Test ledger context passed through extra= is emitted."""
        logger = logging.getLogger("test.context")
        record = logger.makeRecord(
            "test.context",
            logging.INFO,
            "/path/to/file.py",
            42,
            "Issued loan",
            (),
            None,
            extra={"loan_number": "Acme_Ln_001", "unrelated": "x"},
        )

        data = json.loads(JsonFormatter().format(record))

        assert data["loan_number"] == "Acme_Ln_001"
        assert "unrelated" not in data
        assert "loanee_id" not in data

    def test_ledger_logs_carry_loan_number(self, ledger, borrower, caplog) -> None:
        """Test the ledger attaches the loan number to its log records."""
        request = LoanRequest(
            amount=Decimal("1000"),
            loan_type="Personal Loan",
            repayment_period=RepaymentPeriod.DAYS,
            repayment_period_value=30,
            borrower=borrower,
        )

        with caplog.at_level(logging.INFO, logger="loan_ledger"):
            loan = ledger.issue_loan(request)

        issued = [r for r in caplog.records if r.getMessage().startswith("Issued loan")]
        assert issued[0].loan_number == loan.loan_number
        assert json.loads(JsonFormatter().format(issued[0]))["loan_number"] == loan.loan_number


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger(self) -> None:
        """Test getting a logger."""
        logger = get_logger("test.module")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "test.module"

    def test_get_logger_same_instance(self) -> None:
        """Test that get_logger returns same instance for same name."""
        assert get_logger("test.same") is get_logger("test.same")


class TestPackageInit:
    """Tests for loan_ledger __init__.py."""

    def test_version_exported(self) -> None:
        """Test that __version__ is exported."""
        from loan_ledger import __version__

        assert isinstance(__version__, str)
