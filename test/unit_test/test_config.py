"""
Config Module Unit Tests

Tests environment-driven configuration and logging setup.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from solana_program_kit.config import (
    Config,
    LoggingConfig,
    ProgramsConfig,
    enable_file_logging,
    get_config,
    reload_config,
    setup_logging,
)


class TestProgramsConfig:
    """Tests for ProgramsConfig"""

    def test_defaults(self, monkeypatch):
        """Test defaults when the environment is empty"""
        monkeypatch.delenv("KIT_DEFAULT_TOKEN_PROGRAM", raising=False)
        monkeypatch.delenv("KIT_LOG_DERIVATIONS", raising=False)

        cfg = ProgramsConfig()
        assert cfg.default_token_program == "token"
        assert cfg.log_derivations is False

    def test_from_env(self, monkeypatch):
        """Test values are read from the environment"""
        monkeypatch.setenv("KIT_DEFAULT_TOKEN_PROGRAM", "token-2022")
        monkeypatch.setenv("KIT_LOG_DERIVATIONS", "yes")

        cfg = ProgramsConfig()
        assert cfg.default_token_program == "token-2022"
        assert cfg.log_derivations is True

    def test_bool_parsing(self, monkeypatch):
        """Test anything but the truthy spellings is False"""
        monkeypatch.setenv("KIT_LOG_DERIVATIONS", "nope")
        assert ProgramsConfig().log_derivations is False


class TestLoggingConfig:
    """Tests for LoggingConfig"""

    def test_level(self):
        """Test numeric level conversion"""
        assert LoggingConfig(log_level="debug").level == logging.DEBUG
        assert LoggingConfig(log_level="WARNING").level == logging.WARNING
        # Unknown names fall back to INFO
        assert LoggingConfig(log_level="chatty").level == logging.INFO

    def test_invalid_int_falls_back(self, monkeypatch, caplog):
        """Test invalid ints use the default with a warning"""
        monkeypatch.setenv("LOG_BACKUP_COUNT", "many")
        with caplog.at_level(logging.WARNING):
            cfg = LoggingConfig()
        assert cfg.backup_count == 5
        assert "LOG_BACKUP_COUNT" in caplog.text

    def test_file_logging_off_by_default(self, monkeypatch):
        monkeypatch.delenv("LOG_FILE", raising=False)
        assert LoggingConfig().log_file == ""


class TestConfig:
    """Tests for the Config container"""

    def test_reload(self, monkeypatch):
        """Test reload_config picks up environment changes"""
        monkeypatch.setenv("KIT_DEFAULT_TOKEN_PROGRAM", "token-2022")
        cfg = reload_config()
        try:
            assert isinstance(cfg, Config)
            assert get_config() is cfg
            assert cfg.programs.default_token_program == "token-2022"
        finally:
            monkeypatch.delenv("KIT_DEFAULT_TOKEN_PROGRAM")
            reload_config()

    def test_registry_follows_reload(self, monkeypatch):
        """Test the registry reads the reloaded configuration"""
        from solana_program_kit.programs import ProgramRegistry, TOKEN_2022_PROGRAM_ID

        monkeypatch.setenv("KIT_DEFAULT_TOKEN_PROGRAM", "token-2022")
        reload_config()
        try:
            assert ProgramRegistry.default_token_program() == TOKEN_2022_PROGRAM_ID
        finally:
            monkeypatch.delenv("KIT_DEFAULT_TOKEN_PROGRAM")
            reload_config()


class TestSetupLogging:
    """Tests for logging setup"""

    @pytest.fixture
    def logger_name(self):
        """Use a dedicated logger so handlers don't leak into other tests"""
        name = "solana_program_kit_test"
        yield name
        logger = logging.getLogger(name)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    def test_console_only(self, logger_name):
        logger = setup_logging(LoggingConfig(log_file="", console_output=True), logger_name)
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_file_output(self, tmp_path, logger_name):
        """Test rotating file handler is created along with its directory"""
        from logging.handlers import RotatingFileHandler

        log_file = tmp_path / "nested" / "kit.log"
        log_config = LoggingConfig(
            log_file=str(log_file),
            log_level="DEBUG",
            console_output=False,
            max_bytes=1024,
            backup_count=2,
        )
        logger = setup_logging(log_config, logger_name)

        assert len(logger.handlers) == 1
        handler = logger.handlers[0]
        assert isinstance(handler, RotatingFileHandler)
        assert handler.maxBytes == 1024
        assert handler.backupCount == 2
        assert logger.level == logging.DEBUG

        logger.debug("derivation trace")
        handler.flush()
        assert "derivation trace" in log_file.read_text(encoding="utf-8")

    def test_setup_is_repeatable(self, logger_name):
        """Test handlers are replaced, not accumulated"""
        log_config = LoggingConfig(log_file="", console_output=True)
        setup_logging(log_config, logger_name)
        logger = setup_logging(log_config, logger_name)
        assert len(logger.handlers) == 1

    def test_enable_file_logging(self, tmp_path):
        log_file = tmp_path / "quick.log"
        logger = enable_file_logging(str(log_file), level="INFO", console=False)
        try:
            assert logger.name == "solana_program_kit"
            assert log_file.exists()
        finally:
            for handler in logger.handlers[:]:
                handler.close()
                logger.removeHandler(handler)


def main():
    """Run all config unit tests"""
    print("=" * 60)
    print("Config Unit Tests")
    print("=" * 60)

    # Run with pytest
    exit_code = pytest.main([__file__, "-v", "--tb=short"])
    return exit_code == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
