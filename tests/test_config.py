"""
Unit tests for configuration module.

Tests configuration loading, path resolution, logging setup and validation.
"""

import logging
import os
from pathlib import Path
from unittest.mock import patch

from jobboard.config import Config, get_config


class TestConfig:
    """Test suite for Config class."""

    def test_default_configuration(self):
        """Test that default configuration values are set correctly."""
        with patch.dict(os.environ, {}, clear=True):
            config = Config()

            assert config.log_level == "INFO"
            assert config.log_file is None
            assert config.server_name == "jobboard-mcp-server"
            assert config.default_owner_id is None
            assert config.default_page_size == 20

            assert config._repo_root.exists()
            assert config._repo_root.is_dir()

    def test_db_path_from_env_absolute(self):
        with patch.dict(os.environ, {"JOBBOARD_DB": "/absolute/path/board.db"}, clear=True):
            assert str(Config().db_path) == "/absolute/path/board.db"

    def test_db_path_from_env_relative(self):
        with patch.dict(os.environ, {"JOBBOARD_DB": "custom/board.db"}, clear=True):
            config = Config()
            assert config.db_path.name == "board.db"
            assert config.db_path.is_absolute()
            assert "custom" in str(config.db_path)

    def test_db_path_from_root(self):
        with patch.dict(os.environ, {"JOBBOARD_ROOT": "/opt/jobboard"}, clear=True):
            assert Config().db_path == Path("/opt/jobboard") / "data" / "jobboard.db"

    def test_db_path_default(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config()
            assert config.db_path.name == "jobboard.db"
            assert config.db_path.parent.name == "data"

    def test_db_path_priority(self):
        """JOBBOARD_DB takes priority over JOBBOARD_ROOT."""
        with patch.dict(
            os.environ,
            {"JOBBOARD_DB": "/custom/db.db", "JOBBOARD_ROOT": "/opt/jobboard"},
            clear=True,
        ):
            assert str(Config().db_path) == "/custom/db.db"

    def test_log_level_case_insensitive(self):
        with patch.dict(os.environ, {"JOBBOARD_LOG_LEVEL": "debug"}, clear=True):
            assert Config().log_level == "DEBUG"

    def test_log_file_relative(self):
        with patch.dict(os.environ, {"JOBBOARD_LOG_FILE": "logs/server.log"}, clear=True):
            config = Config()
            assert config.log_file.name == "server.log"
            assert "logs" in str(config.log_file)

    def test_owner_from_env(self):
        with patch.dict(os.environ, {"JOBBOARD_OWNER_ID": "  alice  "}, clear=True):
            assert Config().default_owner_id == "alice"

    def test_blank_owner_is_unset(self):
        with patch.dict(os.environ, {"JOBBOARD_OWNER_ID": "   "}, clear=True):
            assert Config().default_owner_id is None

    def test_page_size_from_env(self):
        with patch.dict(os.environ, {"JOBBOARD_DEFAULT_PAGE_SIZE": "50"}, clear=True):
            assert Config().default_page_size == 50

    def test_bad_page_size_falls_back(self):
        with patch.dict(os.environ, {"JOBBOARD_DEFAULT_PAGE_SIZE": "lots"}, clear=True):
            assert Config().default_page_size == 20

    def test_get_db_path_str(self):
        with patch.dict(os.environ, {"JOBBOARD_DB": "/test/db.db"}, clear=True):
            assert Config().get_db_path_str() == "/test/db.db"

    def test_get_config_returns_global(self):
        assert get_config() is get_config()


class TestConfigValidation:
    def test_missing_database(self, tmp_path):
        missing = tmp_path / "missing.db"
        with patch.dict(
            os.environ, {"JOBBOARD_DB": str(missing), "JOBBOARD_OWNER_ID": "alice"}, clear=True
        ):
            warnings = Config().validate()
            assert len(warnings) == 1
            assert "Database file not found" in warnings[0]

    def test_all_valid(self, tmp_path):
        db_file = tmp_path / "board.db"
        db_file.touch()
        with patch.dict(
            os.environ, {"JOBBOARD_DB": str(db_file), "JOBBOARD_OWNER_ID": "alice"}, clear=True
        ):
            assert Config().validate() == []

    def test_page_size_out_of_range(self, tmp_path):
        db_file = tmp_path / "board.db"
        db_file.touch()
        with patch.dict(
            os.environ,
            {
                "JOBBOARD_DB": str(db_file),
                "JOBBOARD_OWNER_ID": "alice",
                "JOBBOARD_DEFAULT_PAGE_SIZE": "500",
            },
            clear=True,
        ):
            warnings = Config().validate()
            assert any("JOBBOARD_DEFAULT_PAGE_SIZE" in w for w in warnings)

    def test_missing_owner_warns(self, tmp_path):
        db_file = tmp_path / "board.db"
        db_file.touch()
        with patch.dict(os.environ, {"JOBBOARD_DB": str(db_file)}, clear=True):
            warnings = Config().validate()
            assert any("JOBBOARD_OWNER_ID" in w for w in warnings)


class TestLoggingSetup:
    def test_setup_logging_to_file(self, tmp_path):
        log_file = tmp_path / "logs" / "server.log"
        with patch.dict(
            os.environ,
            {"JOBBOARD_LOG_FILE": str(log_file), "JOBBOARD_LOG_LEVEL": "DEBUG"},
            clear=True,
        ):
            config = Config()
            root_logger = logging.getLogger()
            saved_handlers = list(root_logger.handlers)
            saved_level = root_logger.level
            try:
                config.setup_logging()
                assert root_logger.level == logging.DEBUG
                assert len(root_logger.handlers) == 2
                assert log_file.exists()
            finally:
                for handler in root_logger.handlers:
                    handler.close()
                root_logger.handlers = saved_handlers
                root_logger.setLevel(saved_level)
