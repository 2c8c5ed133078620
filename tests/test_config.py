from pathlib import Path
import sys

import pytest
import yaml

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from pixelgrid.config import Config, ConversionOptions, ExportOptions
from pixelgrid.errors import InvalidOptionsError


def test_missing_file_gives_defaults(tmp_path):
    config = Config.from_yaml(str(tmp_path / "absent.yaml"))

    assert config.conversion == ConversionOptions()
    assert config.export.background == "#ffffff"
    assert config.export.scale is None
    assert config.storage.path == "pixel_art_state.json"


def test_yaml_values_and_overrides(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({
        'output_dir': 'renders',
        'conversion': {'grid_size': 32, 'color_count': 8, 'crop_to_fit': False},
        'export': {'background': 'transparent', 'include_grid': True},
    }), encoding="utf-8")

    config = Config.from_yaml(str(path), color_count=4, scale=None)

    assert config.output_dir == 'renders'
    assert config.conversion.grid_size == 32
    assert config.conversion.color_count == 4
    assert config.conversion.crop_to_fit is False
    assert config.export.background is None
    assert config.export.include_grid is True


def test_unknown_override_is_rejected(tmp_path):
    with pytest.raises(InvalidOptionsError):
        Config.from_yaml(str(tmp_path / "absent.yaml"), dither=True)


def test_unknown_yaml_key_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("conversion:\n  palette: vintage\n", encoding="utf-8")
    with pytest.raises(InvalidOptionsError):
        Config.from_yaml(str(path))


def test_non_mapping_yaml_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(InvalidOptionsError):
        Config.from_yaml(str(path))


def test_degenerate_values_are_rejected(tmp_path):
    with pytest.raises(InvalidOptionsError):
        Config.from_yaml(str(tmp_path / "absent.yaml"), grid_size=0)
    with pytest.raises(InvalidOptionsError):
        Config.from_yaml(str(tmp_path / "absent.yaml"), color_count=2.5)
    with pytest.raises(InvalidOptionsError):
        Config.from_yaml(str(tmp_path / "absent.yaml"), background="#zzzzzz")
    with pytest.raises(InvalidOptionsError):
        Config(output_dir="").validate()


def test_save_and_reload(tmp_path):
    path = str(tmp_path / "sub" / "config.yaml")
    saved = Config(
        conversion=ConversionOptions(grid_size=48, maintain_aspect_ratio=False),
        export=ExportOptions(scale=12, background=None),
    )

    saved.save_yaml(path)
    loaded = Config.from_yaml(path)

    assert loaded.to_dict() == saved.to_dict()


def test_unsupported_grid_size_only_warns(tmp_path, caplog):
    config = Config.from_yaml(str(tmp_path / "absent.yaml"), grid_size=20)
    assert config.conversion.grid_size == 20
    assert "not one of the editor sizes" in caplog.text
