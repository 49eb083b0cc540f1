"""Tests for configuration loading and validation."""

import json

import pytest

from jumppack.config import (
    DEFAULT_MAPPINGS,
    Action,
    Config,
    ViewMode,
    WindowConfig,
    log_level_from_env,
)
from jumppack.errors import ConfigError


class TestDefaults:
    """Test the default configuration."""

    def test_options(self):
        """Default option values."""
        options = Config().options
        assert options.cwd_only is False
        assert options.wrap_edges is False
        assert options.default_view is ViewMode.PREVIEW
        assert options.count_timeout_ms == 1000
        assert options.log_level == "off"

    def test_every_action_has_a_mapping(self):
        """Each action is bound by default."""
        assert set(DEFAULT_MAPPINGS) == {action.value for action in Action}

    def test_default_bindings(self):
        """Default mappings canonicalize without conflicts."""
        bindings = Config().bindings()
        assert bindings[("ctrl+o",)] is Action.JUMP_BACK
        assert bindings[("tab",)] is Action.JUMP_FORWARD
        assert bindings[("g", "g")] is Action.JUMP_TO_TOP
        assert bindings[("G",)] is Action.JUMP_TO_BOTTOM
        assert bindings[("enter",)] is Action.CHOOSE
        assert bindings[("escape",)] is Action.STOP
        assert len(bindings) == len(Action)


class TestFromDict:
    """Test building a config from user data."""

    def test_merges_over_defaults(self):
        """Only the given fields change."""
        config = Config.from_dict({"options": {"wrap_edges": True}, "mappings": {"stop": "q"}})
        assert config.options.wrap_edges is True
        assert config.options.cwd_only is False
        assert config.mappings["stop"] == "q"
        assert config.mappings["choose"] == "<CR>"

    def test_none_is_defaults(self):
        """No data gives the default config."""
        assert Config.from_dict(None) == Config()

    def test_invalid_default_view(self):
        """An unknown view names the field and the value."""
        with pytest.raises(ConfigError) as exc:
            Config.from_dict({"options": {"default_view": "grid"}})
        assert exc.value.field == "options.default_view"
        assert str(exc.value) == 'options.default_view must be "list" or "preview", got "grid"'

    def test_wrong_types(self):
        """Booleans and numbers are type checked."""
        with pytest.raises(ConfigError):
            Config.from_dict({"options": {"wrap_edges": "yes"}})
        with pytest.raises(ConfigError):
            Config.from_dict({"options": {"count_timeout_ms": True}})
        with pytest.raises(ConfigError):
            Config.from_dict({"options": {"count_timeout_ms": 0}})

    def test_unknown_fields(self):
        """Unknown keys are rejected."""
        with pytest.raises(ConfigError):
            Config.from_dict({"optionz": {}})
        with pytest.raises(ConfigError):
            Config.from_dict({"options": {"speed": 1}})
        with pytest.raises(ConfigError):
            Config.from_dict({"mappings": {"teleport": "t"}})

    def test_not_a_table(self):
        """The top level must be an object."""
        with pytest.raises(ConfigError):
            Config.from_dict(["options"])

    def test_empty_mapping(self):
        """A mapping must not be empty."""
        with pytest.raises(ConfigError):
            Config.from_dict({"mappings": {"stop": ""}})

    def test_duplicate_bindings_rejected(self):
        """Two actions on one key sequence is an error."""
        with pytest.raises(ConfigError) as exc:
            Config.from_dict({"mappings": {"stop": "p"}})
        assert "already bound" in str(exc.value)

    def test_duplicate_after_canonicalization(self):
        """<C-i> and <Tab> are the same key."""
        with pytest.raises(ConfigError):
            Config.from_dict({"mappings": {"toggle_preview": "<Tab>"}})

    def test_unparsable_mapping_dropped(self):
        """A mapping that cannot be canonicalized is silently unbound."""
        config = Config.from_dict({"mappings": {"toggle_preview": "<Nope>"}})
        assert Action.TOGGLE_PREVIEW not in config.bindings().values()

    def test_log_level(self):
        """Log levels are validated and lower-cased."""
        assert Config.from_dict({"options": {"log_level": "DEBUG"}}).options.log_level == "debug"
        with pytest.raises(ConfigError):
            Config.from_dict({"options": {"log_level": "loud"}})


class TestWindow:
    """Test window geometry."""

    def test_golden_ratio_default(self):
        """Unset sizes take the golden-ratio share of the screen."""
        assert WindowConfig().compute(100, 50) == (61, 30)

    def test_fraction_and_cells(self):
        """Floats are fractions, ints are cells."""
        window = Config.from_dict({"window": {"width": 0.5, "height": 10}}).window
        assert window.compute(100, 50) == (50, 10)

    def test_border_room(self):
        """The window never exceeds the screen minus its border."""
        assert WindowConfig(width=200, height=200).compute(100, 50) == (98, 48)

    def test_nested_config_key(self):
        """Geometry may be nested under "config"."""
        window = Config.from_dict({"window": {"config": {"width": 40, "border": "double"}}}).window
        assert window.width == 40
        assert window.border == "double"

    def test_invalid_values(self):
        """Bad sizes and borders are rejected."""
        with pytest.raises(ConfigError):
            Config.from_dict({"window": {"width": 1.5}})
        with pytest.raises(ConfigError):
            Config.from_dict({"window": {"height": -3}})
        with pytest.raises(ConfigError):
            Config.from_dict({"window": {"border": "wavy"}})


class TestWithOptions:
    """Test per-session option overrides."""

    def test_returns_copy(self):
        """Overrides never touch the original config."""
        config = Config()
        override = config.with_options({"wrap_edges": True, "default_view": "list"})
        assert override.options.wrap_edges is True
        assert override.options.default_view is ViewMode.LIST
        assert config.options.wrap_edges is False

    def test_no_overrides(self):
        """No overrides returns the same config."""
        config = Config()
        assert config.with_options(None) is config

    def test_validated(self):
        """Overrides are validated like the config file."""
        with pytest.raises(ConfigError):
            Config().with_options({"default_view": "grid"})


class TestMappings:
    """Test that mappings cannot change behind a config's back."""

    def test_read_only(self):
        """Mappings cannot be assigned through the config."""
        config = Config()
        with pytest.raises(TypeError):
            config.mappings["stop"] = "q"
        assert config.bindings()[("escape",)] is Action.STOP

    def test_private_copy(self):
        """Changing the dict a config was built from leaves the config alone."""
        mappings = dict(DEFAULT_MAPPINGS)
        config = Config(mappings=mappings)
        mappings["stop"] = "q"
        assert config.mappings["stop"] == "<Esc>"
        assert ("q",) not in config.bindings()

    def test_to_dict_is_plain(self):
        """Serialized mappings are an ordinary, detached dict."""
        config = Config()
        data = config.to_dict()
        assert type(data["mappings"]) is dict
        data["mappings"]["stop"] = "q"
        assert config.mappings["stop"] == "<Esc>"
        assert json.loads(json.dumps(data))["mappings"]["choose"] == "<CR>"


class TestLoadSave:
    """Test the config file."""

    def test_missing_file(self, tmp_path):
        """A missing file gives defaults."""
        assert Config.load(tmp_path / "none.json") == Config()

    def test_roundtrip(self, tmp_path):
        """save -> load preserves the config."""
        path = tmp_path / "config.json"
        config = Config.from_dict({"options": {"cwd_only": True}, "window": {"width": 0.5}})
        config.save(path)
        assert Config.load(path) == config

    def test_invalid_json(self, tmp_path):
        """A broken file is a config error."""
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            Config.load(path)

    def test_invalid_content(self, tmp_path):
        """File content is validated."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"options": {"default_view": "grid"}}))
        with pytest.raises(ConfigError):
            Config.load(path)


class TestLogLevelFromEnv:
    """Test the log level environment override."""

    def test_env_wins(self, monkeypatch):
        """JUMPPACK_LOG_LEVEL overrides the config."""
        monkeypatch.setenv("JUMPPACK_LOG_LEVEL", "DEBUG")
        assert log_level_from_env(Config()) == "debug"

    def test_falls_back_to_config(self, monkeypatch):
        """Unknown or unset values use the config."""
        monkeypatch.setenv("JUMPPACK_LOG_LEVEL", "verbose")
        config = Config.from_dict({"options": {"log_level": "info"}})
        assert log_level_from_env(config) == "info"
