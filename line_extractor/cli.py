#!/usr/bin/env python3
"""
extract-lines — cut a scanned page into one image per line of text

  1) mean brightness per row
  2) gaussian smoothing
  3) rows below the --cutoff brightness percentile are text
  4) contiguous text rows form a block
  5) each block is padded by --above / --below of the neighbouring gaps
  6) crops -> OUT/NN.png, profiles -> average_{raw,blurred,cutoff}.png, view.png
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from config.settings import settings
from line_extractor.preprocessing.core import LineExtractor, load_rgb
from line_extractor.preprocessing.models import ExtractionConfig, ExtractionError
from line_extractor.utils.storage import OutputStorage

logger = logging.getLogger("line_extractor")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="extract-lines",
        description="A utility for extracting individual lines of text from an image",
    )
    ap.add_argument("image", help="Path of the image")
    ap.add_argument("-c", "--cutoff", type=float, default=settings.cutoff,
                    help=f"Percentile (0-1) of brightness values separating text and background rows (default {settings.cutoff})")
    ap.add_argument("-a", "--above", type=float, default=settings.above,
                    help=f"Fraction (0-1) of the blank rows BEFORE a line to include (default {settings.above})")
    ap.add_argument("-b", "--below", type=float, default=settings.below,
                    help=f"Fraction (0-1) of the blank rows AFTER a line to include (default {settings.below})")
    ap.add_argument("-s", "--stddev", type=float, default=settings.stddev,
                    help=f"Stddev for the gaussian blur (default {settings.stddev})")
    ap.add_argument("--box-blur", type=int, default=settings.box_size, metavar="SIZE",
                    help="Use a box blur of this radius instead of the gaussian")
    ap.add_argument("-o", "--out", default=settings.output_dir,
                    help=f"Folder for the line images (default {settings.output_dir})")
    ap.add_argument("--diagnostics-dir", default=settings.diagnostics_dir,
                    help=f"Folder for profile/view diagnostics (default {settings.diagnostics_dir})")
    ap.add_argument("--no-diagnostics", action="store_true", help="Do not write diagnostic images")
    ap.add_argument("--clamp", action="store_true", default=settings.clamp_crops,
                    help="Clamp crops reaching outside the image instead of failing")
    ap.add_argument("--keep-trailing-open", action="store_true",
                    help="Drop a text run that is still open at the bottom edge")
    ap.add_argument("--json", action="store_true", help="Print the line intervals as JSON")
    ap.add_argument("--log-level", default=settings.log_level, help="Logging level (default %(default)s)")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        cfg = ExtractionConfig.from_settings(
            settings,
            cutoff=args.cutoff,
            above=args.above,
            below=args.below,
            stddev=args.stddev,
            box_size=args.box_blur,
            clamp_crops=args.clamp,
            close_trailing_block=False if args.keep_trailing_open else None,
        )
        extractor = LineExtractor(cfg)
        rgb = load_rgb(Path(args.image).expanduser())
        result = extractor.run(rgb)
    except ExtractionError as e:
        logger.error(f"{Path(args.image).name}: {e}")
        return 1

    storage = OutputStorage(
        Path(args.out).expanduser(),
        Path(args.diagnostics_dir).expanduser(),
    )
    storage.save_crops(extractor.crops(rgb, result))
    if settings.write_diagnostics and not args.no_diagnostics:
        storage.save_diagnostics(result, extractor.text_view(rgb, result))

    if args.json:
        print(json.dumps({"image": str(args.image), **result.to_dict()}, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
