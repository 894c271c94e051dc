"""Tests for configuration loading and checking."""

import os

import pytest


class TestLoadConfig:
    """Tests for YAML configuration loading."""

    def test_defaults(self):
        """Test default values for the main knobs."""
        from paintnumbers.config import load_config

        config = load_config()

        assert config.quantize.num_colors == 24
        assert config.regions.min_region_size == 250
        assert config.labels.min_region_for_number == 150
        assert config.labels.font_size == 9.0
        assert config.labels.min_font_size == 6.0
        assert config.outline.width == 1
        assert config.legend.swatch_size == 22
        assert config.input.max_dimension == 1000

    def test_missing_file_falls_back_to_defaults(self, temp_dir):
        """Test that a missing config path yields defaults."""
        from paintnumbers.config import load_config

        config = load_config(os.path.join(temp_dir, "absent.yaml"))

        assert config.quantize.num_colors == 24

    def test_partial_override(self, temp_dir):
        """Test that YAML values override only the keys they name."""
        from paintnumbers.config import load_config

        path = os.path.join(temp_dir, "config.yaml")
        with open(path, "w", encoding="utf-8") as f:
            f.write("quantize:\n  num_colors: 12\nregions:\n  min_region_size: 40\n  bogus: 1\nunknown_section:\n  x: 2\n")

        config = load_config(path)

        assert config.quantize.num_colors == 12
        assert config.quantize.sample_budget == 50000
        assert config.regions.min_region_size == 40
        assert not hasattr(config.regions, "bogus")

    def test_empty_file(self, temp_dir):
        """Test that an empty YAML file yields defaults."""
        from paintnumbers.config import load_config

        path = os.path.join(temp_dir, "empty.yaml")
        open(path, "w").close()

        assert load_config(path).legend.max_columns == 10

    def test_save_default_round_trip(self, temp_dir):
        """Test that a saved default config loads back unchanged."""
        from paintnumbers.config import PipelineConfig, load_config, save_default_config

        path = os.path.join(temp_dir, "default.yaml")
        save_default_config(path)

        assert load_config(path) == PipelineConfig()


class TestValidateConfig:
    """Tests for configuration checking."""

    def test_defaults_valid(self, default_config):
        """Test that defaults pass."""
        from paintnumbers.config import validate_config

        assert validate_config(default_config) is default_config

    @pytest.mark.parametrize("section,key,value", [
        ("quantize", "num_colors", 0),
        ("quantize", "precision", 0),
        ("regions", "min_region_size", -1),
        ("labels", "min_font_size", 12.0),
        ("outline", "preview_opacity", 1.5),
        ("legend", "max_columns", 0),
    ])
    def test_bad_values_rejected(self, default_config, section, key, value):
        """Test that unusable values raise ConfigError."""
        from paintnumbers.config import validate_config
        from paintnumbers.errors import ConfigError

        setattr(getattr(default_config, section), key, value)

        with pytest.raises(ConfigError):
            validate_config(default_config)

    def test_all_problems_listed(self, default_config):
        """Test that the error message names every bad value."""
        from paintnumbers.config import validate_config
        from paintnumbers.errors import ConfigError

        default_config.quantize.num_colors = 0
        default_config.legend.padding = -1

        with pytest.raises(ConfigError) as excinfo:
            validate_config(default_config)

        assert "num_colors" in str(excinfo.value)
        assert "padding" in str(excinfo.value)
