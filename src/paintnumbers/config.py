"""
Configuration management for Paint Numbers.

Loads YAML configuration with sensible defaults for all pipeline stages.
"""

import os
from dataclasses import asdict, dataclass, field, fields

import yaml

from paintnumbers.errors import ConfigError


@dataclass
class QuantizeConfig:
    """Configuration for sampling, median-cut and classification."""
    num_colors: int = 24
    sample_budget: int = 50000
    precision: int = 4  # channels rounded to multiples of this before bucketing
    classify_chunk_pixels: int = 65536


@dataclass
class RegionConfig:
    """Configuration for small-region merging."""
    min_region_size: int = 250


@dataclass
class LabelConfig:
    """Configuration for region number placement."""
    min_region_for_number: int = 150
    font_size: float = 9.0
    min_font_size: float = 6.0
    overlap_factor: float = 1.5


@dataclass
class OutlineConfig:
    """Configuration for region outlines."""
    width: int = 1
    preview_opacity: float = 0.15


@dataclass
class LegendConfig:
    """Configuration for the legend strip below the template."""
    swatch_size: int = 22
    padding: int = 16
    row_height: int = 30
    max_columns: int = 10
    font_size: float = 12.0


@dataclass
class InputConfig:
    """Configuration for image loading."""
    max_dimension: int = 1000


@dataclass
class ValidationConfig:
    """Configuration for invariant checks run after rendering."""
    enabled: bool = True


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class DebugConfig:
    """Configuration for debug artifact generation."""
    enabled: bool = False
    max_edge_scale: int = 1600


@dataclass
class PipelineConfig:
    """Complete pipeline configuration."""
    quantize: QuantizeConfig = field(default_factory=QuantizeConfig)
    regions: RegionConfig = field(default_factory=RegionConfig)
    labels: LabelConfig = field(default_factory=LabelConfig)
    outline: OutlineConfig = field(default_factory=OutlineConfig)
    legend: LegendConfig = field(default_factory=LegendConfig)
    input: InputConfig = field(default_factory=InputConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)


SECTIONS = [f.name for f in fields(PipelineConfig)]


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = PipelineConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass. Unknown keys are ignored."""
    for section_name in SECTIONS:
        section_data = yaml_data.get(section_name)
        if not isinstance(section_data, dict):
            continue
        section = getattr(config, section_name)
        for key, value in section_data.items():
            if hasattr(section, key):
                setattr(section, key, value)

    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    yaml_data = asdict(PipelineConfig())

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)


def validate_config(config):
    """
    Check that configuration values can produce output.

    Raises ConfigError listing every problem found.
    """
    errors = []

    if config.quantize.num_colors < 1:
        errors.append("quantize.num_colors must be >= 1")
    if config.quantize.sample_budget < 1:
        errors.append("quantize.sample_budget must be >= 1")
    if not 1 <= config.quantize.precision <= 255:
        errors.append("quantize.precision must be between 1 and 255")
    if config.quantize.classify_chunk_pixels < 1:
        errors.append("quantize.classify_chunk_pixels must be >= 1")
    if config.regions.min_region_size < 0:
        errors.append("regions.min_region_size must be >= 0")
    if config.labels.min_region_for_number < 0:
        errors.append("labels.min_region_for_number must be >= 0")
    if config.labels.min_font_size <= 0:
        errors.append("labels.min_font_size must be > 0")
    if config.labels.min_font_size > config.labels.font_size:
        errors.append("labels.min_font_size must not exceed labels.font_size")
    if config.outline.width < 1:
        errors.append("outline.width must be >= 1")
    if not 0.0 <= config.outline.preview_opacity <= 1.0:
        errors.append("outline.preview_opacity must be between 0 and 1")
    if config.legend.max_columns < 1:
        errors.append("legend.max_columns must be >= 1")
    if config.legend.swatch_size < 1 or config.legend.row_height < 1:
        errors.append("legend.swatch_size and legend.row_height must be >= 1")
    if config.legend.padding < 0:
        errors.append("legend.padding must be >= 0")

    if errors:
        raise ConfigError(f"Invalid configuration: {errors}")

    return config
