# cli.py
# command-line entry point: count blobs in one grid file

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from .config import METHODS, ORDERS, PipelineConfig
from .io_save_load import GridFormatError, save_json
from .pipeline import count_file

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    defaults = PipelineConfig()
    parser = argparse.ArgumentParser(
        prog="blobcount",
        description="Count foreground blobs in a plain-text (P2) grayscale image.",
    )
    parser.add_argument("image", help="input image (.pgm, P2)")
    parser.add_argument("--window-radius", type=int, default=defaults.window_radius,
                        help="Sauvola half-window (default: %(default)s)")
    parser.add_argument("-k", type=float, default=defaults.k,
                        help="Sauvola sensitivity (default: %(default)s)")
    parser.add_argument("-r", type=float, default=defaults.r,
                        help="Sauvola dynamic range of std (default: %(default)s)")
    parser.add_argument("--method", choices=METHODS, default=defaults.method)
    parser.add_argument("--order", choices=ORDERS, default=defaults.order)
    parser.add_argument("--watershed-out", default=defaults.watershed_path,
                        help="relabelled image (default: %(default)s)")
    parser.add_argument("--threshold-out", default=defaults.threshold_path,
                        help="binary image (default: %(default)s)")
    parser.add_argument("--report", help="also write a JSON report here")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)-22s - %(levelname)-8s - %(message)s",
        datefmt="%H:%M:%S",
    )

    config = PipelineConfig(
        window_radius=args.window_radius,
        k=args.k,
        r=args.r,
        method=args.method,
        order=args.order,
        watershed_path=args.watershed_out,
        threshold_path=args.threshold_out,
    )

    try:
        result = count_file(args.image, config)
    except OSError as e:
        print(f"Failed to open file: {args.image}: {e.strerror or e}", file=sys.stderr)
        return 1
    except GridFormatError as e:
        print(f"{args.image}: {e}", file=sys.stderr)
        return 1

    print(f"#components= {result.count}")

    if args.report:
        try:
            save_json(args.report, {
                "file": args.image,
                "config": dataclasses.asdict(config),
                **dataclasses.asdict(result),
            })
        except OSError as e:
            logger.error("failed to write report %s: %s", args.report, e)
    return 0


if __name__ == "__main__":
    sys.exit(main())
