#!/usr/bin/env python3
"""
Multi-monitor wallpaper combiner.

Composes one wallpaper image covering every screen described by a JSON
layout file (see layout_config.py), including screens left of or above the
primary screen, and saves it.

Modes:
- span:        one image stretched across all cycling screens
- all:         one image per cycling screen
- cloned:      the first image repeated on every cycling screen
- one-by-one:  same as "all" for a single run
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from screeninfo import ScreenInfoError

from compositor import CompositionMode, Compositor, strategy_for
from layout_config import load_layout_config
from wallpaper_specs import InvalidArgumentError

DEFAULT_LAYOUT = Path("./layout.json")
DEFAULT_OUTPUT = Path("./combined_wallpaper.png")


def sources_for(required, images, defaults):
    """
    Spread the given image paths over the screens that need one, in screen
    order. Screens that need none get None.
    """
    remaining = list(images)
    sources = []
    for count in required:
        if count and remaining:
            sources.append(defaults.spec_for(remaining.pop(0)))
        else:
            sources.append(None)
    if remaining:
        print(f"Note: {len(remaining)} image(s) not needed for this layout", file=sys.stderr)
    return sources


def main():
    parser = argparse.ArgumentParser(
        description='Combine images into a single multi-monitor wallpaper',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # One image spanning all screens
  %(prog)s --layout layout.json -o output.png --image panorama.jpg

  # One image per screen
  %(prog)s --layout layout.json -o output.png --mode all --image a.jpg --image b.jpg

  # Quarter size preview without the negative-origin fix
  %(prog)s --layout layout.json -o preview.png --image a.jpg --scale 0.25 --no-windows-fix
        """
    )

    parser.add_argument('--layout', default=str(DEFAULT_LAYOUT),
                        help=f'JSON screen layout (default: {DEFAULT_LAYOUT})')
    parser.add_argument('-o', '--output', default=str(DEFAULT_OUTPUT),
                        help=f'Output wallpaper file path (default: {DEFAULT_OUTPUT})')
    parser.add_argument('--image', action='append', default=[],
                        help='Source image, repeat for one image per screen')
    parser.add_argument('--mode', choices=[m.value for m in CompositionMode],
                        help='Composition mode (default: from layout, else span)')
    parser.add_argument('--scale', type=float, default=1.0,
                        help='Scale factor, e.g. 0.25 for a preview (default: 1.0)')
    parser.add_argument('--no-windows-fix', dest='windows_fix', action='store_false',
                        help='Do not pre-wrap the image for desktops extending left/above the primary screen')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log compositing details')

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        config = load_layout_config(args.layout)
        mode = args.mode or config.mode
        strategy = strategy_for(mode)
        compositor = Compositor(dpi=config.dpi)

        required = compositor.required_sources_per_screen(strategy, config.screens)
        if any(required) and not args.image:
            print("Error: at least one --image is required for this layout", file=sys.stderr)
            return 1
        images = [Path(p) for p in args.image]
        if strategy.spans_screens:
            sources = [config.defaults.spec_for(images[0])] if images else []
        else:
            sources = sources_for(required, images, config.defaults)
        if not any(sources):
            # Every screen is static; any wallpaper satisfies the build.
            sources = [config.defaults.spec_for(None)]

        print(f"Creating {mode} wallpaper for {len(config.screens)} screen(s):")
        for screen in config.screens:
            kind = "cycling" if screen.is_eligible() else "static"
            print(f"  Screen {screen.index} {screen.bounds}: {kind}")
        for image in images:
            print(f"  Image: {image}")

        canvas = compositor.build(strategy, config.screens, sources, args.scale, args.windows_fix)
    except (InvalidArgumentError, OSError, json.JSONDecodeError, ScreenInfoError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    # Save the result
    output_path = Path(args.output)
    with canvas:
        canvas.save(output_path, quality=95)
        print(f"\nWallpaper saved to: {output_path.absolute()}")
        print(f"Resolution: {canvas.width}x{canvas.height}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
