"""Tests for configuration loading and check options."""

import pytest

from profqc.qc.options import ProfileCheckOptions
from profqc.utils.exceptions import ConfigError


class TestLoadConfig:
    """Test suite for YAML configuration loading."""

    def test_defaults_loaded(self):
        from profqc.utils.config import load_config

        config = load_config()

        assert config["checks"] == ["Interpolation"]
        assert config["ICheck_TInterpTol"] == 1.0
        assert config["ICheck_BigGaps"][700] == 150

    def test_user_file_overrides_defaults(self, tmp_path):
        """Test user values win and nested mappings merge."""
        from profqc.utils.config import load_config, save_config

        path = tmp_path / "user.yml"
        save_config({"ICheck_TInterpTol": 2.5, "ICheck_BigGaps": {700: 50}}, path)

        config = load_config(path)

        assert config["ICheck_TInterpTol"] == 2.5
        assert config["ICheck_BigGaps"][700] == 50
        assert config["ICheck_BigGaps"][500] == 100
        assert config["ICheck_TolRelax"] == 1.5

    def test_missing_user_file(self, tmp_path):
        from profqc.utils.config import load_config

        with pytest.raises(ConfigError):
            load_config(tmp_path / "absent.yml")

    def test_non_mapping_user_file(self, tmp_path):
        from profqc.utils.config import load_config

        path = tmp_path / "list.yml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_merge_configs_does_not_mutate(self):
        from profqc.utils.config import merge_configs

        base = {"a": {"x": 1, "y": 2}, "b": 1}
        merged = merge_configs(base, {"a": {"y": 3}, "c": 4})

        assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}
        assert base["a"]["y"] == 2


class TestProfileCheckOptions:
    """Test suite for ProfileCheckOptions."""

    def test_from_default_config(self):
        """Test the shipped defaults match the built-in defaults."""
        from profqc.utils.config import load_config

        options = ProfileCheckOptions.from_config(load_config())

        assert options == ProfileCheckOptions()
        assert options.extra == {}

    def test_from_config_values(self):
        options = ProfileCheckOptions.from_config({
            "checks": "Interpolation, Other",
            "StandardLevels": [850, 700],
            "ICheck_BigGaps": [[500, 100], [850, 150]],
            "ICheck_TInterpTol": "2",
            "max_levels": 10,
            "compare_with_reference": True,
            "unrelated": "kept",
        })

        assert options.checks == ("Interpolation", "Other")
        assert options.standard_levels == (850.0, 700.0)
        assert options.big_gaps == ((850.0, 150.0), (500.0, 100.0))
        assert options.t_interp_tol == 2.0
        assert options.max_levels == 10
        assert options.compare_with_reference is True
        assert options.extra == {"unrelated": "kept"}

    @pytest.mark.parametrize("config", [
        {"ICheck_TInterpTol": 0},
        {"ICheck_TolRelax": -1},
        {"ICheck_BigGapInit": -5},
        {"Comparison_Tol": -0.1},
        {"max_levels": -1},
        {"ICheck_TInterpTol": "warm"},
        {"ICheck_BigGaps": {}},
        {"ICheck_BigGaps": {700: -10}},
        {"ICheck_BigGaps": [1, 2, 3]},
    ])
    def test_invalid_values(self, config):
        with pytest.raises(ConfigError):
            ProfileCheckOptions.from_config(config)

    def test_options_are_immutable(self):
        from dataclasses import FrozenInstanceError

        options = ProfileCheckOptions()

        with pytest.raises(FrozenInstanceError):
            options.t_interp_tol = 3.0

    @pytest.mark.parametrize("pressure_hpa,expected", [
        (1000, 15000.0),
        (700, 15000.0),
        (600, 10000.0),
        (150, 5000.0),
        (70, 2000.0),
        (10, 1000.0),
        (5, 1000.0),
    ])
    def test_big_gap_lookup(self, pressure_hpa, expected):
        """Test the first breakpoint not above the level gives the gap in Pa."""
        assert ProfileCheckOptions().big_gap_for(pressure_hpa) == expected

    def test_big_gap_falls_back_to_init(self):
        options = ProfileCheckOptions(big_gaps=((500.0, 100.0),), big_gap_init=777.0)

        assert options.big_gap_for(400) == 777.0

    def test_tolerance_relaxed_below_threshold(self):
        options = ProfileCheckOptions()

        assert options.tolerance_for(30000.0) == 1.0
        assert options.tolerance_for(29999.0) == pytest.approx(1.5)


class TestConfigOverrides:
    """Test suite for layered configuration."""

    def test_overrides_win_over_user_file(self, tmp_path):
        from profqc.utils.config import load_config, save_config

        path = tmp_path / "user.yml"
        save_config({"checks": ["Other"], "ICheck_TolRelax": 2.0}, path)

        config = load_config(path, overrides={"checks": "Interpolation"})

        assert config["checks"] == "Interpolation"
        assert config["ICheck_TolRelax"] == 2.0
        assert ProfileCheckOptions.from_config(config).checks == ("Interpolation",)

    def test_unparsable_user_file(self, tmp_path):
        from profqc.utils.config import load_config

        path = tmp_path / "broken.yml"
        path.write_text("checks: [Interpolation\n")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_empty_user_file_keeps_defaults(self, tmp_path):
        from profqc.utils.config import load_config

        path = tmp_path / "empty.yml"
        path.write_text("")

        assert load_config(path) == load_config()
