# bake_terrain.py

"""
================================================================================
OFFLINE TERRAIN BAKER SCRIPT
================================================================================
This script is a command-line tool for generating an eroded terrain and
saving it to disk. It builds a noise field, upscales it, saves a grayscale
preview, runs the erosion simulation and saves the result.

Outputs (in --output-dir):
    <name>.png                 the upscaled terrain before erosion
    <name>_sim.png             the terrain after erosion
    <name>_sim.npy             raw eroded heights
    generation_config.json     the settings that produced them

Usage:
    python bake_terrain.py --size 64 --seed 42 --name mountains
    python bake_terrain.py --config path/to/your/config.json
================================================================================
"""
import argparse
import json
import logging
import os
import sys

from terrain_eroder import config as DEFAULTS
from terrain_eroder import export
from terrain_eroder.generator import TerrainGenerator


def _prompt(label: str, cast):
    """Asks for a value on stdin until it parses."""
    while True:
        raw = input(f"Enter {label}: ").strip()
        try:
            return cast(raw)
        except ValueError:
            print(f"Invalid value for {label}: {raw!r}")


def _load_config(config_path: str) -> dict:
    with open(config_path, 'r') as f:
        config = json.load(f)
    return config.get('terrain_generation_parameters', {})


def bake_terrain(params: dict, name: str, output_dir: str, progress: bool = True) -> dict:
    """
    Runs the pipeline for the given parameters and writes all outputs.

    Returns:
        dict: Paths of the files that were written, keyed by kind.
    """
    logger = logging.getLogger("Baker")
    generator = TerrainGenerator(config=params, logger=logger)

    scaled, eroded = generator.run(progress=progress)

    written = {
        'preview': export.save_png(scaled, os.path.join(output_dir, f"{name}.png")),
        'eroded': export.save_png(eroded, os.path.join(output_dir, f"{name}_sim.png")),
        'heights': export.save_heights(eroded, os.path.join(output_dir, f"{name}_sim.npy")),
        'settings': export.save_settings(generator.settings, os.path.join(output_dir, "generation_config.json")),
    }
    logger.info(f"Baked terrain saved to: {output_dir}")
    return written


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Offline baker for noise terrain with hydraulic erosion.")
    parser.add_argument("--config", type=str, help="Path to a JSON configuration file.")
    parser.add_argument("--size", type=int, help="Grid size of the base noise field.")
    parser.add_argument("--seed", type=int, help="Seed for noise and droplet generation.")
    parser.add_argument("--name", type=str, help="Base file name for the output images.")
    parser.add_argument("--scale", type=int, help="Upscale factor applied before erosion.")
    parser.add_argument("--drops", type=int, help="Number of erosion droplets to simulate.")
    parser.add_argument("--output-dir", type=str, default=DEFAULTS.DEFAULT_OUTPUT_DIR,
                        help="Directory the outputs are written to.")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")
    return parser


def main(argv=None) -> int:
    # 1. --- Setup Logging ---
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("Baker")
    args = build_parser().parse_args(argv)

    # 2. --- Load Configuration ---
    params = {}
    if args.config:
        logger.info(f"Loading configuration from: {args.config}")
        try:
            params = _load_config(args.config)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            logger.critical(f"Failed to load or parse config file: {e}")
            return 1

    # 3. --- Apply Command-Line Overrides ---
    # Flags win over the config file; anything still missing is asked for.
    if args.size is not None:
        params['grid_size'] = args.size
    if args.seed is not None:
        params['seed'] = args.seed
    if args.scale is not None:
        params['upscale_factor'] = args.scale
    if args.drops is not None:
        params['num_drops'] = args.drops

    if 'grid_size' not in params:
        params['grid_size'] = _prompt("a Grid Size", int)
    if 'seed' not in params:
        params['seed'] = _prompt("a seed for random generation", int)
    name = args.name or _prompt("the file name", str)

    if params['grid_size'] < 1 or params.get('upscale_factor', DEFAULTS.UPSCALE_FACTOR) < 1:
        logger.critical("Grid size and upscale factor must be positive integers.")
        return 1

    # 4. --- Bake ---
    try:
        bake_terrain(params, name, args.output_dir, progress=not args.no_progress)
    except ValueError as e:
        logger.critical(f"Invalid terrain parameters: {e}")
        return 1
    return 0


# --- Command-Line Interface ---
if __name__ == "__main__":
    sys.exit(main())
