#!/usr/bin/env python3
"""
Generate Text Preset Previews

Renders catalog presets to their preview assets. Run this by hand after adding
or changing a preset in text_style/catalog.py.

Usage:
    python generate_previews.py                          # Render every preset
    python generate_previews.py "Shadow Title"           # Render one preset (name or slug)
    python generate_previews.py --dry-run                # Show what would be written
    python generate_previews.py --fail-fast --workers=2  # Stop on the first failure
    python generate_previews.py --assets-dir=/tmp/assets # Write somewhere else
"""

import argparse
import sys

from dotenv import load_dotenv

# Load environment variables first (ASSETS_DIR, LOG_DIR, TEXT_STYLE_*)
load_dotenv()

from text_style import TEXT_PRESETS, TextStyleError, get_preset, render_presets
from text_style.logging_config import get_logger, setup_logging

from assets import resolve_asset_path, write_image

logger = get_logger('generate_previews')


def select_presets(names):
    """Look up presets by name or slug; all presets when no names are given."""
    if not names:
        return list(TEXT_PRESETS)

    selected = []
    for name in names:
        preset = get_preset(name)
        if preset is None:
            raise SystemExit(f"Unknown preset: {name}")
        selected.append(preset)
    return selected


def generate(presets, assets_dir=None, workers=None, fail_fast=False, dry_run=False):
    """
    Render presets and write each to its preview path.

    Returns:
        Number of presets that failed
    """
    targets = {p.name: resolve_asset_path(p.preview, assets_dir) for p in presets}

    if dry_run:
        for name, path in targets.items():
            print(f"{name:<24} -> {path}")
        return 0

    result = render_presets(presets, max_workers=workers, fail_fast=fail_fast)

    failed = len(result.errors)

    for name, data in result.rendered.items():
        try:
            write_image(data, targets[name])
        except OSError as e:
            failed += 1
            logger.error(f"Could not write preview for '{name}' to {targets[name]}: {e}")
            continue
        logger.info(f"Wrote preview for '{name}' to {targets[name]}")

    for name, error in result.errors.items():
        logger.error(f"Skipped '{name}': {error}")

    return failed


def main(argv=None):
    parser = argparse.ArgumentParser(description='Render text preset preview images')
    parser.add_argument('presets', nargs='*', help='Preset names or slugs (default: all)')
    parser.add_argument('--assets-dir', default=None, help='Assets root (default: ASSETS_DIR)')
    parser.add_argument('--workers', type=int, default=None, help='Render threads')
    parser.add_argument('--fail-fast', action='store_true', help='Abort on the first failed preset')
    parser.add_argument('--dry-run', action='store_true', help='List output paths without rendering')
    parser.add_argument('--no-log-file', action='store_true', help='Log to the console only')
    args = parser.parse_args(argv)

    setup_logging(log_to_file=not args.no_log_file)

    presets = select_presets(args.presets)
    try:
        failed = generate(
            presets,
            assets_dir=args.assets_dir,
            workers=args.workers,
            fail_fast=args.fail_fast,
            dry_run=args.dry_run,
        )
    except TextStyleError as e:
        logger.error(f"Preview generation aborted: {e}")
        return 1

    return 1 if failed else 0


if __name__ == '__main__':
    sys.exit(main())
