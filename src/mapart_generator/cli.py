"""
Command-Line Interface for Map Art Generator

Usage:
    mapart castle.png -o castle.nbt
    mapart castle.png --mode staircase_classic --support steps --filler stone
    mapart castle.png --mode suppress_pairs -o out/
    mapart --batch maps/ --output-dir structures/

"""

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional
import time

from . import __version__
from .classifier import CustomColor, ValidationError
from .converter import MapArtConverter
from .options import BuildMode, SupportMode
from .presets import PRESETS, get_preset, load_mapping


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mapart",
        description="Map Art Generator - Convert 128x128 map art images to Minecraft structure files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mapart castle.png -o castle.nbt
      Convert castle.png using the default staircase (valley) build

  mapart castle.png --preset Fullblock --mode staircase_classic --support steps
      Full blocks, one staircase per column, support under every step

  mapart castle.png --mode suppress_pairs -o out/
      Write out/castle-suppress_rowsplit.zip with both halves

  mapart castle.png --custom 10,20,30=stone --repair --stats
      Add a custom color, snap stray colors to the palette, print usage

Build Modes:
  flat                 - Single level (only FLAT shades render correctly)
  staircase_valley     - Every segment as low as possible (default)
  staircase_classic    - Each column rests on y=0
  staircase_northline  - First row is the baseline
  staircase_southline  - Last row is the baseline
  staircase_cancer     - Random heights that still render correctly
  suppress_pairs       - Two row-split structures in a .zip
  suppress_pairs_ew    - East-to-west zig-zag of column pairs
  suppress_dual_layer  - Two fixed layers (see --layer-gap)

Support Modes:
  none, steps, all, fragile, water
        """
    )

    # Input
    parser.add_argument(
        "input",
        nargs="?",
        help="Input map art image (128x128 PNG)"
    )

    # Output
    parser.add_argument(
        "-o", "--output",
        help="Output file or directory (default: next to the input)"
    )

    # Build settings
    parser.add_argument(
        "-m", "--mode",
        choices=[m.value for m in BuildMode if m != BuildMode.SUPPRESS_CHECKER],
        default=BuildMode.STAIRCASE_VALLEY.value,
        help="Structure build mode (default: staircase_valley)"
    )

    parser.add_argument(
        "-s", "--support",
        choices=[m.value for m in SupportMode],
        default=SupportMode.NONE.value,
        help="Support filler placement (default: none)"
    )

    parser.add_argument(
        "--filler",
        default="stone",
        help="Filler block id, 'air' or 'none' to disable (default: stone)"
    )

    parser.add_argument(
        "--layer-gap",
        type=int,
        default=5,
        help="Height of the second layer for suppress_dual_layer (default: 5)"
    )

    parser.add_argument(
        "--no-auto-flat",
        action="store_true",
        help="Keep the selected mode even when the image has only flat shades"
    )

    # Block mapping
    parser.add_argument(
        "-p", "--preset",
        choices=list(PRESETS),
        default="Default",
        help="Built-in block mapping (default: Default)"
    )

    parser.add_argument(
        "--mapping",
        help="JSON file with block overrides ({\"index or NAME\": \"block\"})"
    )

    parser.add_argument(
        "--custom",
        action="append",
        default=[],
        metavar="R,G,B=BLOCK",
        help="Custom color override, may be repeated"
    )

    # Color handling
    parser.add_argument(
        "--repair",
        action="store_true",
        help="Replace colors outside the palette with the nearest map color"
    )

    # Batch processing
    parser.add_argument(
        "--batch",
        help="Batch process directory of images"
    )

    parser.add_argument(
        "--output-dir",
        help="Output directory for batch processing"
    )

    parser.add_argument(
        "--pattern",
        default="*.png",
        help="File pattern for batch processing (default: *.png)"
    )

    # Misc
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output with statistics"
    )

    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print palette usage and material counts"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def parse_custom_color(text: str) -> CustomColor:
    """Parse "r,g,b=block" into a CustomColor."""
    rgb, sep, block = text.partition("=")
    parts = rgb.split(",")
    if not sep or not block.strip() or len(parts) != 3:
        raise ValueError(f"Custom color must look like R,G,B=BLOCK (got '{text}')")

    try:
        r, g, b = (int(p) for p in parts)
    except ValueError:
        raise ValueError(f"Custom color channels must be integers (got '{text}')") from None

    if not all(0 <= c <= 255 for c in (r, g, b)):
        raise ValueError(f"Custom color channels must be 0-255 (got '{text}')")

    return CustomColor(r, g, b, block.strip())


def format_stacks(count: int) -> str:
    """
    Express a block count in shulker boxes, stacks and items.

    Example: 1800 -> "1sb 1st 8"
    """
    if count < 64:
        return str(count)
    boxes, rem = divmod(count, 64 * 27)
    stacks, items = divmod(rem, 64)
    parts = [f"{boxes}sb" if boxes else "", f"{stacks}st" if stacks else "", str(items) if items else ""]
    return " ".join(p for p in parts if p) or "0"


def build_block_mapping(args) -> Dict[int, str]:
    """Preset mapping with --mapping overrides applied."""
    mapping = get_preset(args.preset)
    if args.mapping:
        mapping.update(load_mapping(args.mapping))
    return mapping


def create_converter(args) -> MapArtConverter:
    """Build a converter from parsed arguments."""
    return MapArtConverter(
        block_mapping=build_block_mapping(args),
        filler_block=args.filler,
        build_mode=args.mode,
        support_mode=args.support,
        custom_colors=[parse_custom_color(c) for c in args.custom],
        layer_gap=args.layer_gap,
        auto_flat=not args.no_auto_flat,
    )


def print_stats(converter: MapArtConverter):
    """Print palette usage and the material list."""
    stats = converter.stats()
    print("\nImage Statistics:")
    print(f"  Unique colors: {stats.unique_shade_count}")
    print(f"  Base colors: {stats.unique_base_color_count}")
    print(f"  Pixels needing suppress: {converter.suppressed_pixel_count}")
    print(f"  Build mode: {converter.build_mode.value}")

    counts = converter.material_counts()
    print(f"\nMaterials ({sum(counts.values())} blocks):")
    for name, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])):
        print(f"  {name}: {count} ({format_stacks(count)})")


def convert_one(converter: MapArtConverter, input_path: Path, output: Path, args) -> Path:
    """Load, check and export a single image."""
    converter.load_image(input_path)

    result = converter.validate()
    if not result.valid:
        if not args.repair:
            raise ValidationError("; ".join(result.errors), result.errors)
        converter.repair()
        if args.verbose:
            print(f"Repaired {len(converter.repaired_colors)} colors")

    if args.stats or args.verbose:
        print_stats(converter)

    return converter.export(output)


def process_single(args) -> int:
    """Process a single image file."""
    if not args.input:
        print("Error: No input file specified", file=sys.stderr)
        return 1

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    output = Path(args.output) if args.output else input_path.parent
    if args.output and args.output.endswith("/"):
        output.mkdir(parents=True, exist_ok=True)

    start_time = time.time()

    try:
        converter = create_converter(args)

        if args.verbose:
            print(f"Loading: {input_path}")
            print(f"Mode: {args.mode}, support: {args.support}, filler: {args.filler}")

        output_path = convert_one(converter, input_path, output, args)

        if args.verbose:
            print(f"Exported: {output_path}")

        elapsed = time.time() - start_time
        if args.verbose:
            print(f"\nCompleted in {elapsed:.2f}s")

        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def process_batch(args) -> int:
    """Process a batch of images."""
    batch_dir = Path(args.batch)
    if not batch_dir.is_dir():
        print(f"Error: Batch directory not found: {batch_dir}", file=sys.stderr)
        return 1

    output_dir = Path(args.output_dir) if args.output_dir else batch_dir / "output"
    output_dir.mkdir(parents=True, exist_ok=True)

    start_time = time.time()

    try:
        converter = create_converter(args)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    outputs = []
    failures = 0
    for input_path in sorted(batch_dir.glob(args.pattern)):
        try:
            outputs.append(convert_one(converter, input_path, output_dir, args))
            if args.verbose:
                print(f"Exported: {outputs[-1]}")
        except Exception as e:
            failures += 1
            print(f"Error: {input_path.name}: {e}", file=sys.stderr)

    elapsed = time.time() - start_time
    print(f"Processed {len(outputs)} files in {elapsed:.2f}s")
    print(f"Output directory: {output_dir}")

    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.batch:
        return process_batch(args)
    return process_single(args)


if __name__ == "__main__":
    sys.exit(main())
