#!/usr/bin/env python3
"""
Sticker Grid Pipeline CLI

Composite sticker images into 2x4 grids, remove near-white backgrounds
with a border flood fill, erase grid seams, and split grids into
LINE-sized sticker cells.
"""

import argparse
import sys
from pathlib import Path

from stickergrid.pipeline import (
    Bitmap,
    PipelineConfig,
    PipelineLogger,
    StickerGridError,
    StickerSheetPipeline,
)
from stickergrid.pipeline.config import SUPPORTED_STICKER_COUNTS
from stickergrid.pipeline.export import sticker_filename
from stickergrid.pipeline.logger import DEFAULT_LOG_FILE
from stickergrid.pipeline.stages import composite_grid, remove_background, split_grid


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stickergrid",
        description="LINE sticker grid pipeline: composite, background removal, split",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Composite 8 stickers into one 740x1280 grid
  %(prog)s composite a.png b.png c.png -o grid.png

  # Remove white background (writes <name>_transparent.png)
  %(prog)s remove-bg --threshold 230 grid.png

  # Split the last grid of a 20-sticker set
  %(prog)s split grid3_transparent.png --count 20 --offset 16 -o stickers/

  # Full pipeline with main and tab images
  %(prog)s build *.png --main main.png --tab tab.png -o stickers/
        """,
    )

    # Shared options
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--cell-width", type=int, default=370, help="Cell width (default: 370)")
    common.add_argument("--cell-height", type=int, default=320, help="Cell height (default: 320)")
    common.add_argument(
        "--threshold",
        type=int,
        default=240,
        metavar="N",
        help="Background brightness threshold (200-255, default: 240). Lower = more aggressive.",
    )
    common.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    common.add_argument(
        "--debug", action="store_true", help="Enable debug mode with detailed logging"
    )
    common.add_argument(
        "--log-file",
        type=Path,
        default=DEFAULT_LOG_FILE,
        help=f"Custom log file path (default: {DEFAULT_LOG_FILE})",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    composite = commands.add_parser(
        "composite", parents=[common], help="Composite up to 8 images into a grid"
    )
    composite.add_argument("files", nargs="+", type=Path, help="Sticker images in cell order")
    composite.add_argument("-o", "--output", type=Path, required=True, help="Output grid path")

    remove_bg = commands.add_parser(
        "remove-bg", parents=[common], help="Make the border-connected background transparent"
    )
    remove_bg.add_argument("files", nargs="+", type=Path, help="Input image files")
    remove_bg.add_argument(
        "-o", "--output", type=Path, help="Output path (for single file only)"
    )

    split = commands.add_parser("split", parents=[common], help="Split a grid into cells")
    split.add_argument("grid", type=Path, help="Grid image")
    split.add_argument("-o", "--output", type=Path, required=True, help="Output directory")
    split.add_argument(
        "--count", type=int, help="Total stickers in the set (drops padding cells)"
    )
    split.add_argument(
        "--offset", type=int, default=0, help="Global index of this grid's first sticker"
    )

    build = commands.add_parser(
        "build", parents=[common], help="Run the full pipeline over sticker images"
    )
    build.add_argument("files", nargs="+", type=Path, help="Sticker images")
    build.add_argument("-o", "--output", type=Path, required=True, help="Output directory")
    build.add_argument("--main", type=Path, help="Main image (exported as 240x240)")
    build.add_argument("--tab", type=Path, help="Tab image (exported as 96x74)")

    return parser


def run_composite(args, config: PipelineConfig, logger: PipelineLogger) -> int:
    grid = composite_grid(args.files, config.cell_width, config.cell_height, logger)
    grid.save(args.output)
    logger.log_info(f"✓ Grid saved → {args.output}")
    return 0


def run_remove_bg(args, config: PipelineConfig, logger: PipelineLogger) -> int:
    success_count = 0
    for file_path in args.files:
        try:
            logger.start_grid(str(file_path))
            result = remove_background(
                Bitmap.open(file_path), config.background_threshold, logger=logger
            )
            output_path = args.output or file_path.with_name(
                f"{file_path.stem}_transparent.png"
            )
            result.save(output_path)
            logger.save_grid_log()
            logger.log_info(f"✓ Success: {file_path} → {output_path}")
            success_count += 1
        except FileNotFoundError as e:
            logger.log_error(f"✗ File not found: {e}")
        except StickerGridError as e:
            logger.log_error(f"✗ Failed: {e}")
            logger.save_grid_log()

    logger.log_info(f"Done! Processed {success_count}/{len(args.files)} images.")
    return 0 if success_count == len(args.files) else 1


def run_split(args, config: PipelineConfig, logger: PipelineLogger) -> int:
    logger.start_grid(str(args.grid))
    cells = split_grid(Bitmap.open(args.grid), config.cell_width, config.cell_height, logger)
    logger.save_grid_log()

    if args.count is not None:
        cells = cells[: max(0, args.count - args.offset)]

    args.output.mkdir(parents=True, exist_ok=True)
    for number, cell in enumerate(cells, start=args.offset + 1):
        cell.save(args.output / sticker_filename(number))
    logger.log_info(f"✓ Wrote {len(cells)} cell(s) → {args.output}")
    return 0


def run_build(args, config: PipelineConfig, logger: PipelineLogger) -> int:
    pipeline = StickerSheetPipeline(config=config, logger=logger)
    sticker_set = pipeline.build(args.files, main=args.main, tab=args.tab)
    written = sticker_set.write(args.output)
    logger.log_info(f"✓ Wrote {len(written)} file(s) → {args.output}")
    return 0


COMMANDS = {
    "composite": run_composite,
    "remove-bg": run_remove_bg,
    "split": run_split,
    "build": run_build,
}


def main(argv=None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "remove-bg" and args.output and len(args.files) > 1:
        parser.error("--output can only be used with a single input file")

    logger = PipelineLogger(
        log_file=args.log_file, debug_mode=args.debug, verbose=args.verbose
    )

    sticker_count = len(args.files) if args.command == "build" else 8
    if args.command == "build" and sticker_count not in SUPPORTED_STICKER_COUNTS:
        logger.log_warning(
            f"LINE sticker sets hold {', '.join(map(str, SUPPORTED_STICKER_COUNTS))} "
            f"stickers; got {sticker_count}"
        )

    try:
        config = PipelineConfig(
            cell_width=args.cell_width,
            cell_height=args.cell_height,
            background_threshold=args.threshold,
            sticker_count=sticker_count,
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        return COMMANDS[args.command](args, config, logger)
    except FileNotFoundError as e:
        logger.log_error(f"✗ File not found: {e}")
    except StickerGridError as e:
        logger.log_error(f"✗ Failed: {e}", exc_info=args.verbose or args.debug)
    except KeyboardInterrupt:
        logger.log_warning("Interrupted by user")
        return 130

    return 1


if __name__ == "__main__":
    sys.exit(main())
