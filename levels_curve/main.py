# Command line entry point
import argparse
import sys

from .config import settings
from .io import load_pixel_buffer, save_pixel_buffer
from .processing import CurvePoint, HistogramBuilder, PointField, ToneCurveMapper, render_guide
from .utils.errors import AppError, format_user_error
from .utils.logger import get_logger, set_log_level

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    enter_default = settings.CURVE_DEFAULTS["enter"]
    exit_default = settings.CURVE_DEFAULTS["exit"]
    ap = argparse.ArgumentParser(
        prog="levels-curve",
        description="Apply a two-point tone curve to an image and optionally write its histogram guide.",
    )
    ap.add_argument("input", help="Input image path")
    ap.add_argument("output", help="Output image path")
    ap.add_argument("--enter", nargs=2, type=int, metavar=("IN", "OUT"),
                    default=list(enter_default), help="Lower control point (default: %(default)s)")
    ap.add_argument("--exit", nargs=2, type=int, metavar=("IN", "OUT"),
                    default=list(exit_default), help="Upper control point (default: %(default)s)")
    ap.add_argument("--guide", metavar="PATH", help="Also write the histogram/curve guide image here")
    ap.add_argument("--log-level", default=settings.LOGGING_LEVEL,
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity")
    return ap


def _apply_edits(mapper: ToneCurveMapper, enter, exit_):
    """Feeds the requested points through the same validation as interactive edits."""
    edits = [
        (CurvePoint.ENTER, PointField.IN, enter[0]),
        (CurvePoint.ENTER, PointField.OUT, enter[1]),
        (CurvePoint.EXIT, PointField.IN, exit_[0]),
        (CurvePoint.EXIT, PointField.OUT, exit_[1]),
    ]
    for point, part, value in edits:
        if mapper.set_control_point(point, part, value) is None:
            return f"rejected {point.value}.{part.value}={value}"
    return None


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    set_log_level(args.log_level)

    source = load_pixel_buffer(args.input)
    if source is None:
        print(f"Could not load '{args.input}'", file=sys.stderr)
        return 1

    mapper = ToneCurveMapper()
    problem = _apply_edits(mapper, args.enter, args.exit)
    if problem is not None:
        print(f"Invalid curve: {problem} (enter IN must not exceed exit IN, levels 0-255)",
              file=sys.stderr)
        return 2

    try:
        mapping = mapper.derive_mapping()
        logger.info("Curve %s: slope=%.4f intercept=%.4f", mapper.state.as_dict(),
                    mapping.slope, mapping.intercept)
        output = mapper.apply(source, mapping)
        if not save_pixel_buffer(output, args.output):
            print(f"Could not save '{args.output}'", file=sys.stderr)
            return 1

        if args.guide:
            histogram = HistogramBuilder().build(source)
            if not save_pixel_buffer(render_guide(histogram, mapper.state), args.guide):
                print(f"Could not save guide '{args.guide}'", file=sys.stderr)
                return 1
    except AppError as e:
        print(format_user_error(e, "applying the curve"), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
