"""Tests for configuration loading."""

import json

import pytest

from jrnl_md.config import (
    AppConfig,
    default_editor,
    dict_to_config,
    find_config_file,
    load_config,
    write_default_config,
)


class TestFindConfigFile:
    """Tests for find_config_file."""

    def test_finds_toml_first(self, temp_dir):
        """TOML config wins over JSON."""
        (temp_dir / "config.toml").write_text("")
        (temp_dir / "config.json").write_text("{}")

        assert find_config_file(temp_dir).name == "config.toml"

    def test_finds_json(self, temp_dir):
        (temp_dir / "config.json").write_text("{}")

        assert find_config_file(temp_dir).name == "config.json"

    def test_returns_none_if_no_config(self, temp_dir):
        assert find_config_file(temp_dir) is None


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, temp_dir):
        """No config file means defaults rooted at the storage dir."""
        config = load_config(temp_dir)

        assert config.storage_dir == temp_dir
        assert config.default_journal == "journal"
        assert config.log_level == "WARNING"
        assert config.get_journal_path() == temp_dir / "journal.json"

    def test_load_toml(self, temp_dir):
        """TOML sections map onto config fields."""
        (temp_dir / "config.toml").write_text(
            '[editor]\ncommand = "nano -w"\n\n'
            '[journal]\ndefault = "work"\n\n'
            '[logging]\nlevel = "debug"\nfile = "jrnl.log"\n\n'
            '[storage]\nlock_timeout = 2\n'
        )

        config = load_config(temp_dir)

        assert config.editor == "nano -w"
        assert config.default_journal == "work"
        assert config.log_level == "DEBUG"
        assert config.log_file == "jrnl.log"
        assert config.lock_timeout == 2.0
        assert config.get_journal_path() == temp_dir / "work.json"

    def test_load_flat_json(self, temp_dir):
        """The first-run JSON layout (flat editor string) is accepted."""
        (temp_dir / "config.json").write_text(json.dumps({"editor": "code --wait"}))

        assert load_config(temp_dir).editor == "code --wait"

    def test_explicit_path(self, temp_dir):
        other = temp_dir / "elsewhere.json"
        other.write_text(json.dumps({"journal": {"default": "dreams"}}))

        assert load_config(temp_dir, other).default_journal == "dreams"

    def test_storage_dir_override(self, temp_dir):
        config = dict_to_config({"storage": {"dir": str(temp_dir / "data")}}, temp_dir)

        assert config.storage_dir == temp_dir / "data"

    def test_unsupported_suffix(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("editor: vi")

        with pytest.raises(ValueError):
            load_config(temp_dir, path)


class TestDefaults:
    """Tests for default values and first-run config."""

    def test_editor_from_environment(self, monkeypatch):
        monkeypatch.delenv("VISUAL", raising=False)
        monkeypatch.setenv("EDITOR", "emacs")

        assert default_editor() == "emacs"

    def test_editor_fallback(self, monkeypatch):
        monkeypatch.delenv("VISUAL", raising=False)
        monkeypatch.delenv("EDITOR", raising=False)

        assert default_editor() == "vi"

    def test_write_default_config(self, temp_dir):
        """First run writes config.json once and never overwrites it."""
        config = AppConfig(storage_dir=temp_dir, editor="nano")
        path = write_default_config(config)

        assert json.loads(path.read_text()) == {"editor": "nano"}

        config.editor = "vim"
        write_default_config(config)
        assert json.loads(path.read_text()) == {"editor": "nano"}
