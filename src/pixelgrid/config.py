"""
Configuration management for the pixel art converter.
"""

import os
import logging
import numbers
import yaml
from dataclasses import dataclass, field
from typing import Optional

from .color_math import normalize_hex
from .errors import InvalidOptionsError

logger = logging.getLogger(__name__)

# Grid sizes offered by the editor's size picker.
SUPPORTED_GRID_SIZES = (8, 16, 24, 32, 48, 64, 96, 128)

DEFAULT_GRID_SIZE = 16
DEFAULT_COLOR_COUNT = 16


def require_positive_int(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidOptionsError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidOptionsError(f"{name} must be positive, got {value}")


@dataclass
class ConversionOptions:
    """Image to pixel art conversion parameters."""
    grid_size: int = DEFAULT_GRID_SIZE
    color_count: int = DEFAULT_COLOR_COUNT
    maintain_aspect_ratio: bool = True
    crop_to_fit: bool = True

    def __post_init__(self):
        """Reject degenerate options before any computation starts."""
        require_positive_int("grid_size", self.grid_size)
        require_positive_int("color_count", self.color_count)
        self.grid_size = int(self.grid_size)
        self.color_count = int(self.color_count)
        self.maintain_aspect_ratio = bool(self.maintain_aspect_ratio)
        self.crop_to_fit = bool(self.crop_to_fit)


@dataclass
class ExportOptions:
    """PNG export configuration."""
    # None picks a scale from the grid size, see resolve_scale()
    scale: Optional[int] = None
    # Hex color, or None / "transparent" for a transparent background
    background: Optional[str] = "#ffffff"
    include_grid: bool = False
    filename: str = "pixel-avatar"

    def __post_init__(self):
        if self.scale is not None:
            require_positive_int("scale", self.scale)
        if isinstance(self.background, str) and self.background.strip().lower() == "transparent":
            self.background = None
        if self.background is not None:
            try:
                self.background = normalize_hex(self.background)
            except ValueError as e:
                raise InvalidOptionsError(f"Invalid background color: {e}") from e
        if not self.filename:
            raise InvalidOptionsError("filename must not be empty")

    def resolve_scale(self, grid_size: int) -> int:
        """Pixels per cell for a grid of ``grid_size``."""
        requested = self.scale if self.scale is not None else max(20, 640 // grid_size)
        minimum = 8 if grid_size >= 64 else 16
        return max(requested, minimum)


@dataclass
class StorageConfig:
    """Session snapshot storage."""
    path: str = "pixel_art_state.json"
    default_size: int = DEFAULT_GRID_SIZE

    def __post_init__(self):
        require_positive_int("default_size", self.default_size)


@dataclass
class Config:
    """Main configuration class."""
    output_dir: str = "out"
    config_file: Optional[str] = None

    conversion: ConversionOptions = field(default_factory=ConversionOptions)
    export: ExportOptions = field(default_factory=ExportOptions)
    storage: StorageConfig = field(default_factory=StorageConfig)

    @classmethod
    def from_yaml(cls, config_path: str, **overrides) -> "Config":
        """Load configuration from YAML file with optional overrides.

        Overrides with a value of None are ignored so CLI options that were
        not given do not clobber file values.
        """
        if not os.path.exists(config_path):
            data = {}
        else:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise InvalidOptionsError(f"Config file {config_path} must contain a mapping")

        conversion = dict(data.get('conversion') or {})
        export = dict(data.get('export') or {})
        storage = dict(data.get('storage') or {})
        top = {'output_dir': data.get('output_dir', 'out')}

        # Route each override to the section that owns it
        for key, value in overrides.items():
            if value is None:
                continue
            if key in ConversionOptions.__dataclass_fields__:
                conversion[key] = value
            elif key in ExportOptions.__dataclass_fields__:
                export[key] = value
            elif key in StorageConfig.__dataclass_fields__:
                storage[key] = value
            elif key in top:
                top[key] = value
            else:
                raise InvalidOptionsError(f"Unknown configuration key: {key}")

        try:
            config = cls(
                output_dir=top['output_dir'],
                config_file=config_path,
                conversion=ConversionOptions(**conversion),
                export=ExportOptions(**export),
                storage=StorageConfig(**storage),
            )
        except TypeError as e:
            raise InvalidOptionsError(f"Invalid configuration in {config_path}: {e}") from e

        config.validate()
        return config

    def validate(self):
        """Validate configuration parameters."""
        if not self.output_dir:
            raise InvalidOptionsError("output_dir must not be empty")
        if self.conversion.grid_size not in SUPPORTED_GRID_SIZES:
            logger.warning(
                "Grid size %d is not one of the editor sizes %s",
                self.conversion.grid_size, SUPPORTED_GRID_SIZES,
            )

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return {
            'output_dir': self.output_dir,
            'conversion': {
                'grid_size': self.conversion.grid_size,
                'color_count': self.conversion.color_count,
                'maintain_aspect_ratio': self.conversion.maintain_aspect_ratio,
                'crop_to_fit': self.conversion.crop_to_fit,
            },
            'export': {
                'scale': self.export.scale,
                'background': self.export.background,
                'include_grid': self.export.include_grid,
                'filename': self.export.filename,
            },
            'storage': {
                'path': self.storage.path,
                'default_size': self.storage.default_size,
            },
        }

    def save_yaml(self, path: Optional[str] = None):
        """Save configuration to YAML file."""
        if path is None:
            path = self.config_file or "config.yaml"

        dir_path = os.path.dirname(path)
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, indent=2, sort_keys=False)
