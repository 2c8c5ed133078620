"""
Command-line interface for the pixel art converter.
"""

import os
import sys
import logging

import click

from . import __version__
from .config import Config, SUPPORTED_GRID_SIZES
from .converter import PixelArtConverter
from .export import export_png
from .generators import generate_random_scene, generate_scene, list_scenes
from .image_io import ImageLoader
from .quantize import ColorQuantizer
from .session import EditorSession
from .storage import GridStore


def _print_palette(palette):
    stats = ColorQuantizer().get_color_statistics(palette)
    click.echo(f"[palette] {len(stats)} colors:")
    for i, entry in enumerate(stats, 1):
        click.echo(f"  {i:2d}. {entry['hex']}  {entry['count']:6d} px  ({entry['percentage']:.1f}%)")


def _save_state(grid, state_path, default_size):
    session = EditorSession(GridStore(state_path), default_size=default_size)
    session.replace_grid(grid)
    path = session.save()
    click.echo(f"[save] Session saved to {path}")


def _fail(e):
    click.echo(f"[X] Error: {e}", err=True)
    sys.exit(1)


@click.group(name='pixelgrid')
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable progress logging')
def cli(verbose):
    """
    Pixel Art Grid Converter

    Turn any picture into an N×N pixel art grid with a small palette.
    """
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument('input_image', type=click.Path(exists=True))
@click.argument('output_png', type=click.Path())
@click.option('--config', '-c', default='config.yaml', help='Configuration file path')
@click.option('--grid-size', '-g', type=int, help='Grid size N (cells per side)')
@click.option('--colors', '-n', type=int, help='Maximum palette size')
@click.option('--stretch', is_flag=True, help='Ignore the aspect ratio')
@click.option('--letterbox', is_flag=True, help='Fit the whole image and pad with empty cells')
@click.option('--scale', type=int, help='Pixels per cell in the exported PNG')
@click.option('--grid-lines', is_flag=True, help='Draw cell boundaries')
@click.option('--background', help="Background hex color, or 'transparent'")
@click.option('--state', type=click.Path(), help='Also save the grid as a session snapshot')
def convert(input_image, output_png, config, grid_size, colors, stretch, letterbox,
            scale, grid_lines, background, state):
    """
    Convert an image into pixel art and export it as PNG.

    INPUT_IMAGE: Path to input image
    OUTPUT_PNG: Path for the exported PNG
    """
    try:
        cfg = Config.from_yaml(
            config,
            grid_size=grid_size,
            color_count=colors,
            maintain_aspect_ratio=False if stretch else None,
            crop_to_fit=False if letterbox else None,
            scale=scale,
            include_grid=True if grid_lines else None,
            background=background,
        )

        click.echo(f"[convert] {input_image} -> {cfg.conversion.grid_size}x{cfg.conversion.grid_size} grid")
        result = PixelArtConverter(cfg.conversion).convert_file(input_image)
        path = export_png(result.grid, output_png, cfg.export)
        _print_palette(result.palette)

        if state:
            _save_state(result.grid, state, cfg.storage.default_size)

        click.echo(f"[OK] Pixel art exported: {path}")
    except Exception as e:
        _fail(e)


@cli.command()
@click.argument('input_image', type=click.Path(exists=True))
@click.option('--config', '-c', default='config.yaml', help='Configuration file path')
@click.option('--grid-size', '-g', type=int, help='Grid size N (cells per side)')
@click.option('--colors', '-n', type=int, help='Maximum palette size')
def palette(input_image, config, grid_size, colors):
    """Show the palette extracted from an image."""
    try:
        cfg = Config.from_yaml(config, grid_size=grid_size, color_count=colors)
        result = PixelArtConverter(cfg.conversion).convert_file(input_image)
        _print_palette(result.palette)
    except Exception as e:
        _fail(e)


@cli.command()
@click.argument('scene', type=click.Choice(list_scenes() + ['random'], case_sensitive=False))
@click.argument('output_png', type=click.Path())
@click.option('--size', '-s', type=int, default=16, show_default=True, help='Grid size N')
@click.option('--seed', type=int, help='Random seed for a reproducible scene')
@click.option('--scale', type=int, help='Pixels per cell in the exported PNG')
@click.option('--grid-lines', is_flag=True, help='Draw cell boundaries')
@click.option('--config', '-c', default='config.yaml', help='Configuration file path')
@click.option('--background', help="Background hex color, or 'transparent'")
@click.option('--state', type=click.Path(), help='Also save the grid as a session snapshot')
def generate(scene, output_png, size, seed, scale, grid_lines, config, background, state):
    """Generate a procedural scene and export it as PNG."""
    try:
        if size not in SUPPORTED_GRID_SIZES:
            click.echo(f"[WARN] Size {size} is not one of the editor sizes {SUPPORTED_GRID_SIZES}")

        if scene.lower() == 'random':
            grid = generate_random_scene(size, seed)
        else:
            grid = generate_scene(scene, size, seed)

        cfg = Config.from_yaml(
            config,
            scale=scale,
            include_grid=True if grid_lines else None,
            background=background,
        )
        path = export_png(grid, output_png, cfg.export)

        if state:
            _save_state(grid, state, size)

        click.echo(f"[OK] {scene} scene exported: {path} ({len(grid.colors_used())} colors)")
    except Exception as e:
        _fail(e)


@cli.command()
@click.argument('input_image', type=click.Path())
def validate(input_image):
    """Validate an input image for processing."""
    result = ImageLoader().validate_image(input_image)

    for key, value in result['info'].items():
        click.echo(f"  {key}: {value}")
    for warning in result['warnings']:
        click.echo(f"[WARN] {warning}")

    if not result['valid']:
        for error in result['errors']:
            click.echo(f"[X] Validation failed: {error}", err=True)
        sys.exit(1)

    click.echo("[OK] Image is valid for processing")


@cli.command()
@click.option('--output', '-o', default='config.yaml', help='Output configuration file path')
@click.option('--force', '-f', is_flag=True, help='Overwrite an existing file')
def init_config(output, force):
    """Create a default configuration file."""
    try:
        if os.path.exists(output) and not force:
            if not click.confirm(f"Configuration file '{output}' already exists. Overwrite?"):
                click.echo("Configuration creation cancelled.")
                return

        Config(config_file=output).save_yaml(output)
        click.echo(f"[OK] Configuration written to {output}")
    except Exception as e:
        _fail(e)


def main():
    """Main CLI entry point."""
    cli()


if __name__ == '__main__':
    main()
