#!/usr/bin/env python3
"""
Pick random wallpapers for every cycling screen, combine them and apply.

The number of images picked follows the layout: one for "span" and "cloned",
one per cycling screen for "all". By default uses date-seeded selection
(stable all day, changes daily).

Usage:
  python set_combined_wallpaper.py                       # today's pick
  python set_combined_wallpaper.py --random              # new random each run
  python set_combined_wallpaper.py --layout desk.json    # custom screen layout
  python set_combined_wallpaper.py --dry-run             # show picks, no compositing or applying
"""

import argparse
import json
import random
import subprocess
import sys
from datetime import date
from pathlib import Path

from screeninfo import ScreenInfoError

from compositor import Compositor, strategy_for
from layout_config import LayoutConfig, load_layout_config
from overlay_templates import read_exif_info
from screens import ScreeninfoScreenLayout, regions_from_layout
from wallpaper_specs import InvalidArgumentError

DEFAULT_INPUT = Path("./bing_wallpapers/high")
DEFAULT_LAYOUT = Path("./layout.json")
DEFAULT_OUTPUT = Path("./combined_wallpaper.png")


def print_image_info(label: str, path: Path):
    info = read_exif_info(path)
    print(f"{label}: {path.name}")
    if info.get("caption"):
        print(f"  Caption: {info['caption']}")
    elif info.get("description"):
        print(f"           {info['description']}")
    if info.get("artist"):
        print(f"  Artist:  {info['artist']}")


def apply_wallpaper(filepath: Path):
    uri = filepath.resolve().as_uri()
    subprocess.run(
        ["gsettings", "set", "org.cinnamon.desktop.background", "picture-uri", uri],
        check=True,
    )
    subprocess.run(
        ["gsettings", "set", "org.cinnamon.desktop.background", "picture-options", "spanned"],
        check=True,
    )


def load_config(layout_path: Path) -> LayoutConfig:
    if layout_path.exists():
        return load_layout_config(layout_path)
    # No layout file: every detected monitor cycles with default settings.
    return LayoutConfig(screens=regions_from_layout(ScreeninfoScreenLayout()))


def main():
    parser = argparse.ArgumentParser(
        description="Combine random wallpapers for a multi-monitor setup and apply"
    )
    parser.add_argument(
        "--input", default=str(DEFAULT_INPUT),
        help=f"Directory to pick from (default: {DEFAULT_INPUT})",
    )
    parser.add_argument(
        "--layout", default=str(DEFAULT_LAYOUT),
        help=f"JSON screen layout (default: {DEFAULT_LAYOUT}, else detected with screeninfo)",
    )
    parser.add_argument(
        "--output", default=str(DEFAULT_OUTPUT),
        help=f"Output path for combined image (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--random", dest="truly_random", action="store_true",
        help="Pick new random images each run (default: date-seeded, stable all day)",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Show which images would be picked without compositing or applying",
    )
    args = parser.parse_args()

    catalog = Path(args.input)
    if not catalog.is_dir():
        print(f"Error: {catalog} is not a directory")
        return 1

    try:
        config = load_config(Path(args.layout))
        strategy = strategy_for(config.mode)
        compositor = Compositor(dpi=config.dpi)
        required = compositor.required_sources_per_screen(strategy, config.screens)
    except (InvalidArgumentError, OSError, json.JSONDecodeError, ScreenInfoError) as exc:
        print(f"Error: {exc}")
        return 1

    needed = 1 if strategy.spans_screens else sum(required)
    files = sorted(
        f for f in catalog.iterdir()
        if f.is_file() and f.suffix.lower() == ".jpg"
    )
    if len(files) < needed:
        print(f"Need at least {needed} wallpapers in {catalog} (found {len(files)})")
        return 1

    if args.truly_random:
        picks = random.sample(files, needed)
    else:
        seed = int(date.today().strftime("%Y%m%d"))
        picks = random.Random(seed).sample(files, needed)

    if strategy.spans_screens:
        sources = [config.defaults.spec_for(picks[0])]
        print_image_info("All screens", picks[0])
    else:
        remaining = list(picks)
        sources = []
        for index, count in enumerate(required):
            if count:
                pick = remaining.pop(0)
                sources.append(config.defaults.spec_for(pick))
                print_image_info(f"Screen {index}", pick)
            else:
                sources.append(None)
                print(f"Screen {index}: static")
    if not any(sources):
        sources = [config.defaults.spec_for(None)]

    if args.dry_run:
        print("\n(dry run — not composited or applied)")
        return 0

    output = Path(args.output)
    print(f"\nCompositing → {output}")
    try:
        # Cinnamon spans from the top-left of the whole X screen, not the primary monitor.
        canvas = compositor.build(strategy, config.screens, sources, use_windows_fix=False)
    except InvalidArgumentError as exc:
        print(f"Error: {exc}")
        return 1
    with canvas:
        canvas.save(output, quality=95)
        print(f"Saved ({canvas.size[0]}x{canvas.size[1]})")

    apply_wallpaper(output)
    print("Applied (spanned).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
