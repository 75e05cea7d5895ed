"""Tests for the config module."""

import os

from openqa_serial.config import DEFAULT_ASSET, DEFAULT_TIMEOUT, Config
from openqa_serial.render import RenderOptions


class TestDefaults:
    def test_defaults(self, monkeypatch):
        for name in ("OPENQA_SERIAL_NUMBERS", "OPENQA_SERIAL_COLORS", "OPENQA_SERIAL_TIMEOUT", "OPENQA_SERIAL_ASSET", "NO_COLOR"):
            monkeypatch.delenv(name, raising=False)
        config = Config()
        assert config.numbers is True
        assert config.colors is True
        assert config.timeout == 30.0
        assert config.asset == DEFAULT_ASSET

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("OPENQA_SERIAL_NUMBERS", "0")
        monkeypatch.setenv("OPENQA_SERIAL_TIMEOUT", "5")
        monkeypatch.setenv("OPENQA_SERIAL_ASSET", "serial0.txt")
        config = Config()
        assert config.numbers is False
        assert config.timeout == 5.0
        assert config.asset == "serial0.txt"

    def test_bad_timeout_falls_back_to_default(self, monkeypatch, caplog):
        for value in ("abc", "0", "-5", "nan"):
            monkeypatch.setenv("OPENQA_SERIAL_TIMEOUT", value)
            assert Config().timeout == DEFAULT_TIMEOUT
        assert "OPENQA_SERIAL_TIMEOUT" in caplog.text

    def test_no_color_disables_colors(self, monkeypatch):
        monkeypatch.setenv("OPENQA_SERIAL_COLORS", "1")
        monkeypatch.setenv("NO_COLOR", "1")
        assert Config().colors is False

    def test_colors_flag_values(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        for value, expected in (("off", False), ("false", False), ("yes", True), ("", True)):
            monkeypatch.setenv("OPENQA_SERIAL_COLORS", value)
            assert Config().colors is expected

    def test_render_options(self):
        config = Config(numbers=False, colors=True)
        assert config.render_options() == RenderOptions(numbers=False, colors=True)


class TestEnvFile:
    def test_ensure_env_file_creates_file(self, tmp_path):
        config = Config(env_file=tmp_path / "openqa-serial" / "env")
        assert config.ensure_env_file() is True
        assert config.env_file.exists()
        assert "OPENQA_SERIAL_NUMBERS" in config.env_file.read_text()

    def test_ensure_env_file_idempotent(self, tmp_path):
        config = Config(env_file=tmp_path / "openqa-serial" / "env")
        config.ensure_env_file()
        assert config.ensure_env_file() is False  # already exists

    def test_load_env_file_sets_vars(self, tmp_path, monkeypatch):
        env_file = tmp_path / "env"
        env_file.write_text("OPENQA_SERIAL_NUMBERS=0\n")
        monkeypatch.delenv("OPENQA_SERIAL_NUMBERS", raising=False)

        Config(env_file=env_file).load_env_file()

        assert os.environ.get("OPENQA_SERIAL_NUMBERS") == "0"
        assert Config().numbers is False
        monkeypatch.delenv("OPENQA_SERIAL_NUMBERS", raising=False)

    def test_load_env_file_skips_comments(self, tmp_path, monkeypatch):
        env_file = tmp_path / "env"
        env_file.write_text("# SHOULD_NOT_SET=value\nnot an assignment\nACTUAL_KEY=works\n")
        monkeypatch.delenv("SHOULD_NOT_SET", raising=False)
        monkeypatch.delenv("ACTUAL_KEY", raising=False)

        Config(env_file=env_file).load_env_file()

        assert os.environ.get("SHOULD_NOT_SET") is None
        assert os.environ.get("ACTUAL_KEY") == "works"
        monkeypatch.delenv("ACTUAL_KEY", raising=False)

    def test_load_env_file_does_not_overwrite(self, tmp_path, monkeypatch):
        env_file = tmp_path / "env"
        env_file.write_text("OPENQA_SERIAL_ASSET=from_file\n")
        monkeypatch.setenv("OPENQA_SERIAL_ASSET", "from_env")

        Config(env_file=env_file).load_env_file()

        assert os.environ.get("OPENQA_SERIAL_ASSET") == "from_env"

    def test_load_env_file_strips_quotes(self, tmp_path, monkeypatch):
        env_file = tmp_path / "env"
        env_file.write_text("QUOTED_KEY='with-single-quotes'\nDOUBLE_KEY=\"with-double\"\n")
        monkeypatch.delenv("QUOTED_KEY", raising=False)
        monkeypatch.delenv("DOUBLE_KEY", raising=False)

        Config(env_file=env_file).load_env_file()

        assert os.environ.get("QUOTED_KEY") == "with-single-quotes"
        assert os.environ.get("DOUBLE_KEY") == "with-double"
        monkeypatch.delenv("QUOTED_KEY", raising=False)
        monkeypatch.delenv("DOUBLE_KEY", raising=False)

    def test_load_missing_env_file_is_noop(self, tmp_path):
        config = Config(env_file=tmp_path / "nonexistent")
        config.load_env_file()  # should not raise
