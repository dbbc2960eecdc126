"""Tests for config loading, merging and editing."""

import sys

import pytest
import tomli_w

from kindkit.core.config import (
    find_kind,
    kind_command,
    load_config,
    load_defaults,
    load_user_config,
    save_config,
    set_config_value,
    spec_policy,
    user_config_path,
)


def test_defaults_load():
    """Verify defaults.toml loads and has expected sections."""
    config = load_defaults()
    assert config["tools"]["kind"] == "kind"
    assert config["cluster"]["default_name"] == "kind"
    assert config["progress"]["interesting_prefix"] == "•"
    assert config["create"]["spec_policy"] == "auto"


def test_user_override(tmp_path):
    """User config overrides defaults, keeping the rest."""
    path = tmp_path / "config.toml"
    with open(path, "wb") as f:
        tomli_w.dump({"cluster": {"default_name": "dev"}, "custom_key": "hello"}, f)

    config = load_config(path)
    assert config["cluster"]["default_name"] == "dev"
    assert config["cluster"]["node_image"] == "kindest/node"
    assert config["custom_key"] == "hello"


def test_missing_user_config(tmp_path):
    """Missing user config just returns defaults."""
    assert load_config(tmp_path / "nonexistent.toml") == load_defaults()
    assert load_user_config(tmp_path / "nonexistent.toml") == {}


def test_env_var_path(tmp_path, monkeypatch):
    monkeypatch.setenv("KINDKIT_CONFIG", str(tmp_path / "elsewhere.toml"))
    assert user_config_path() == tmp_path / "elsewhere.toml"


def test_save_creates_folder(tmp_path):
    path = save_config({"cluster": {"default_name": "x"}}, tmp_path / "a" / "b" / "config.toml")
    assert path.exists()
    assert load_user_config(path) == {"cluster": {"default_name": "x"}}


class TestSetConfigValue:
    def test_coerces_to_default_type(self):
        config = {}
        set_config_value(config, "progress.merge_stderr", "true")
        set_config_value(config, "web.poll_interval", "2")
        set_config_value(config, "cluster.default_name", "dev")
        assert config == {
            "progress": {"merge_stderr": True},
            "web": {"poll_interval": 2.0},
            "cluster": {"default_name": "dev"},
        }

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown config key"):
            set_config_value({}, "cluster.flavour", "x")

    def test_needs_section(self):
        with pytest.raises(ValueError, match="section.key"):
            set_config_value({}, "kind", "x")


class TestKindCommand:
    def test_default(self):
        assert kind_command(load_defaults()) == ["kind"]

    def test_string_is_split(self):
        assert kind_command({"tools": {"kind": "/usr/bin/env kind"}}) == ["/usr/bin/env", "kind"]

    def test_list(self):
        assert kind_command({"tools": {"kind": ["python", "fake.py"]}}) == ["python", "fake.py"]

    def test_missing(self):
        assert kind_command({}) == ["kind"]

    def test_find_kind_existing_file(self):
        assert find_kind({"tools": {"kind": [sys.executable]}}) == sys.executable

    def test_find_kind_missing(self):
        assert find_kind({"tools": {"kind": "/nonexistent/kindkit-missing-binary"}}) is None


class TestSpecPolicy:
    @pytest.mark.parametrize("value", ["auto", "always", "never", "ALWAYS"])
    def test_known(self, value):
        assert spec_policy({"create": {"spec_policy": value}}) == value.lower()

    def test_default(self):
        assert spec_policy({}) == "auto"

    def test_unknown(self):
        with pytest.raises(ValueError, match="spec_policy"):
            spec_policy({"create": {"spec_policy": "maybe"}})
