"""Tests for the YAML game configuration loader."""

from pathlib import Path

import pytest

from novadefense.loaders.game_config_loader import GameConfig, load_game_config

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


class TestGameConfigDefaults:
    def test_defaults_are_valid(self):
        assert GameConfig().validate() == []

    def test_default_constants(self):
        cfg = GameConfig()
        assert cfg.total_levels == 100
        assert cfg.level_duration_sec == 60
        assert (cfg.level_1_rockets, cfg.level_n_rockets) == (50, 200)
        assert cfg.ammo_multiplier == 3.0
        assert cfg.interceptor_speed == 4.5
        assert cfg.explosion_max_radius == 40
        assert cfg.explosion_growth_rate == 1.5
        assert cfg.points_per_rocket == 20

    @pytest.mark.parametrize("overrides,fragment", [
        ({"total_levels": 0}, "total_levels"),
        ({"tick_rate": 0}, "tick_rate"),
        ({"rocket_speed_min": 2.0, "rocket_speed_max": 1.0}, "rocket_speed_max"),
        ({"level_1_rockets": 300}, "level_n_rockets"),
        ({"city_count": 0}, "city_count"),
        ({"side_ammo_share": 0.7}, "side_ammo_share"),
    ])
    def test_validate_reports_problems(self, overrides, fragment):
        problems = GameConfig(**overrides).validate()
        assert any(fragment in p for p in problems)


class TestLoadGameConfig:
    def test_missing_file_returns_defaults(self, tmp_path):
        cfg = load_game_config(str(tmp_path / "absent.yaml"))
        assert cfg == GameConfig()

    def test_overrides_and_defaults(self, tmp_path):
        path = tmp_path / "game.yaml"
        path.write_text("total_levels: 10\nfield_width: 800\n")
        cfg = load_game_config(str(path))
        assert cfg.total_levels == 10
        assert cfg.field_width == 800
        assert cfg.level_1_rockets == 50

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "game.yaml"
        path.write_text("total_levels: 7\nmystery_setting: 3\n")
        cfg = load_game_config(str(path))
        assert cfg.total_levels == 7
        assert not hasattr(cfg, "mystery_setting")

    def test_empty_file_returns_defaults(self, tmp_path):
        path = tmp_path / "game.yaml"
        path.write_text("")
        assert load_game_config(str(path)) == GameConfig()

    def test_invalid_values_raise(self, tmp_path):
        path = tmp_path / "game.yaml"
        path.write_text("rocket_speed_min: 3.0\nrocket_speed_max: 1.0\n")
        with pytest.raises(ValueError, match="rocket_speed_max"):
            load_game_config(str(path))

    def test_shipped_config_loads(self):
        cfg = load_game_config(str(CONFIG_DIR / "game.yaml"))
        assert cfg.total_levels == 100
        assert cfg.ws_port == 8765
