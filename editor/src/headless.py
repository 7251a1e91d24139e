"""Headless Card Renderer - CLI entry point.

Renders an ID card PNG from a profile JSON file, an optional position map
and optional template/logo/photo images, exactly as the editor shows the
card at rest (no zoom, no pan).

Usage:
    python -m editor.src.headless --profile PROFILE.json -o OUT.png [options]

Examples:
    python -m editor.src.headless --profile student.json -o card.png
    python -m editor.src.headless --profile student.json --positions layout.json \\
        --template template.png --logo1 uni.png --logo2 faculty.png -o card.png
    python -m editor.src.headless --profile student.json --grid -o debug.png
"""

import sys
import os
import argparse
import json
import logging

# Add editor/src to path so imports work
_src_dir = os.path.dirname(os.path.abspath(__file__))
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

from constants import STORAGE_KEY_POSITIONS
from models.position_store import PositionStore
from models.profile import CardContent, CardProfile
from utils.logger import configure_logging

logger = logging.getLogger(__name__)


def _read_json(file_path: str):
    with open(file_path, "r", encoding="utf-8-sig") as f:
        return json.load(f)


def _load_positions(file_path: str) -> PositionStore:
    """Position map from a JSON file.

    Accepts either a bare ``{element: {"x":.., "y":..}}`` map or a layout
    storage file holding it under ``positions``.
    """
    if not file_path:
        return PositionStore()
    data = _read_json(file_path)
    if isinstance(data, dict) and isinstance(data.get(STORAGE_KEY_POSITIONS), dict):
        data = data[STORAGE_KEY_POSITIONS]
    return PositionStore.from_mapping(data)


def build_parser():
    parser = argparse.ArgumentParser(
        description='Render a student ID card to a PNG image (headless).',
    )
    parser.add_argument(
        '--profile',
        required=True,
        help='Profile JSON file (snake_case or camelCase keys).',
    )
    parser.add_argument(
        '--positions',
        help='Position map JSON file (default: built-in layout).',
    )
    parser.add_argument('--template', help='Card template image.')
    parser.add_argument('--logo1', help='First logo image.')
    parser.add_argument('--logo2', help='Second logo image.')
    parser.add_argument('--photo', help='Card photo (defaults to the profile picture).')
    parser.add_argument(
        '--use-profile-photo',
        action='store_true',
        help='Always use the profile picture instead of --photo.',
    )
    parser.add_argument('--font', help='TrueType font for text fields.')
    parser.add_argument(
        '--grid',
        action='store_true',
        help='Overlay the layout debug grid.',
    )
    parser.add_argument(
        '-o', '--output',
        required=True,
        help='Output PNG path.',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    # Logging
    configure_logging(verbose=args.verbose)

    profile_path = os.path.abspath(args.profile)
    if not os.path.isfile(profile_path):
        print(f"Error: Profile file not found: {profile_path}")
        return 1

    try:
        profile = CardProfile.from_dict(_read_json(profile_path))
        store = _load_positions(args.positions)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    content = CardContent(
        profile=profile,
        template=args.template,
        logo1=args.logo1,
        logo2=args.logo2,
        photo=args.photo,
        use_profile_photo=args.use_profile_photo,
    )

    from services.card_renderer import CardRenderer

    renderer = CardRenderer(font_path=args.font)
    out_file = renderer.save(store.snapshot(), content, os.path.abspath(args.output), debug_grid=args.grid)
    print(f"Rendered card to {out_file}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
