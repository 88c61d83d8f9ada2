import argparse
import logging

from .config import (
    DEFAULT_HEIGHT,
    DEFAULT_ITERATION_DEPTH,
    DEFAULT_WIDTH,
    TARGET_FPS,
    ViewerConfig,
)
from .logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mandelview",
        description="Interactive Mandelbrot viewer",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--dims",
        type=int,
        default=[DEFAULT_WIDTH, DEFAULT_HEIGHT],
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        help="The dimensions of the plot, in pixels",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=DEFAULT_ITERATION_DEPTH,
        help="the max iterations to perform",
    )
    parser.add_argument(
        "--center",
        type=float,
        default=[0.0, 0.0],
        nargs=2,
        metavar=("X", "Y"),
        help="The plane coordinates at the center of the view",
    )
    parser.add_argument(
        "--zoom",
        type=float,
        default=1.0,
        help="view extent scale; 1.0 spans 4 units, smaller values zoom in",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=TARGET_FPS,
        help="target frame rate of the render loop",
    )
    parser.add_argument(
        "--always-redraw",
        action="store_true",
        help="regenerate the plot on every frame instead of only on changes",
    )
    parser.add_argument(
        "--legacy-palette",
        action="store_true",
        help="paint from iteration counts instead of the engine's RGBA buffer",
    )
    parser.add_argument(
        "-o",
        "--snapshot",
        metavar="PATH",
        help="render a single frame to PATH and exit without opening a window",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parser.add_argument(
        "--log-file",
        help="also write the log to this file",
    )
    return parser


def config_from_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> ViewerConfig:
    try:
        return ViewerConfig(
            width=args.dims[0],
            height=args.dims[1],
            iteration_depth=args.depth,
            center_x=args.center[0],
            center_y=args.center[1],
            zoom=args.zoom,
            fps=args.fps,
            always_redraw=args.always_redraw,
            legacy_palette=args.legacy_palette,
            snapshot=args.snapshot,
        )
    except ValueError as exc:
        parser.error(str(exc))


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    config = config_from_args(parser, args)

    setup_logging(getattr(logging, args.log_level), args.log_file)

    # pygame is only needed once we know which mode we run in
    from .viewer import MandelbrotViewer, render_to_file

    if config.snapshot:
        render_to_file(config, config.snapshot)
    else:
        MandelbrotViewer(config).run()


if __name__ == "__main__":
    main()
