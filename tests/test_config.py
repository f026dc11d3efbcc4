import pytest

from halls.config import WorldConfig, load_config, validate_settings
from halls.errors import ConfigError, HallsError


def test_defaults_match_packaged_yaml(tmp_path):
    config = load_config(tmp_path / "missing.yaml", env={})
    assert config == WorldConfig()


def test_user_file_is_deep_merged(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("map:\n  width: 50\nview:\n  base_vision: 3\n", encoding="utf-8")
    config = load_config(path, env={})
    assert config.map_width == 50
    assert config.map_height == 40
    assert config.base_vision == 3
    assert config.view_width == 41


def test_environment_overrides_win(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("world:\n  seed: 5\n", encoding="utf-8")
    env = {"HALLS_SEED": "77", "HALLS_LEVELS": "2", "HALLS_TICK_SECONDS": "0.25", "HALLS_MAP_WIDTH": ""}
    config = load_config(path, env=env)
    assert config.seed == 77
    assert config.level_count == 2
    assert config.tick_seconds == pytest.approx(0.25)
    assert config.map_width == 64


def test_bad_environment_value(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yaml", env={"HALLS_SEED": "abc"})


def test_schema_rejects_unknown_and_out_of_range(tmp_path):
    with pytest.raises(ConfigError):
        validate_settings({"map": {"colour": "red"}})
    path = tmp_path / "settings.yaml"
    path.write_text("warrior:\n  hp: 0\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path, env={})


def test_invalid_yaml_is_a_config_error(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("map: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path, env={})
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path, env={})


def test_range_checks_in_the_dataclass():
    with pytest.raises(ConfigError):
        WorldConfig(level_count=0)
    with pytest.raises(ConfigError):
        WorldConfig(map_width=10, max_room_width=14)
    with pytest.raises(HallsError):
        WorldConfig(evolve_interval=0)


def test_round_trip_through_sections():
    config = WorldConfig(seed=9, map_width=30, max_room_width=10, tick_seconds=0.5)
    assert WorldConfig.from_dict(config.to_dict()) == config
    validate_settings(config.to_dict())
