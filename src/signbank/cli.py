"""CLI for signbank: ``signbank detect``, ``compare``, ``quality``, ``stats``, ``import`` and ``serve``."""

import argparse
import json
import sys
import logging
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="signbank",
        description="Hand gesture library and sign matching",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )
    sub = parser.add_subparsers(dest="command")

    # signbank detect
    detect_p = sub.add_parser("detect", help="Match a landmark file against a library")
    detect_p.add_argument("library", help="Gesture library JSON file")
    detect_p.add_argument(
        "query",
        help="JSON file with a detection request body or a bare landmark payload",
    )
    detect_p.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Override the confidence threshold (default: 0.7)",
    )

    # signbank compare
    compare_p = sub.add_parser("compare", help="Compare two landmark files")
    compare_p.add_argument("first", help="First landmark JSON file")
    compare_p.add_argument("second", help="Second landmark JSON file")

    # signbank quality
    quality_p = sub.add_parser("quality", help="Show training quality per gesture")
    quality_p.add_argument("library", help="Gesture library JSON file")
    quality_p.add_argument(
        "--gesture",
        default=None,
        help="Only report this gesture name",
    )
    quality_p.add_argument(
        "--min-samples",
        type=int,
        default=5,
        help="Validated samples needed to be ready (default: 5)",
    )

    # signbank stats
    stats_p = sub.add_parser("stats", help="Show library statistics")
    stats_p.add_argument("library", help="Gesture library JSON file")

    # signbank import
    import_p = sub.add_parser("import", help="Import a labeled landmark sample")
    import_p.add_argument("library", help="Gesture library JSON file (created if missing)")
    import_p.add_argument("label", help="Gesture label (e.g. 'Thank You')")
    import_p.add_argument("landmarks", help="Landmark JSON file")
    import_p.add_argument(
        "--confidence",
        type=float,
        required=True,
        help="Sample confidence score in [0, 1]",
    )

    # signbank serve
    serve_p = sub.add_parser("serve", help="Run the detection HTTP service")
    serve_p.add_argument(
        "library",
        nargs="?",
        default=None,
        help="Gesture library JSON file (default: $SIGNBANK_LIBRARY or ~/.signbank/library.json)",
    )
    serve_p.add_argument("--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)")
    serve_p.add_argument("--port", type=int, default=5000, help="Bind port (default: 5000)")

    return parser


def _read_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _read_hands(path: str):
    """Read a hand payload, accepting a detection request body as well."""
    from signbank.payloads import parse_detect_request, parse_hands

    data = _read_json(path)
    if isinstance(data, Mapping) and any(
        key in data for key in ("landmarks", "landmarkData", "handData")
    ):
        return parse_detect_request({"confidence": 1.0, **data}).hands
    return parse_hands(data)


def _cmd_detect(args: argparse.Namespace) -> None:
    """Handle ``signbank detect``."""
    from signbank.matcher import GestureMatcher, MatcherConfig
    from signbank.persistence import load_library

    library = load_library(args.library)
    query = _read_hands(args.query)

    config = MatcherConfig()
    if args.threshold is not None:
        config.threshold = args.threshold

    result = GestureMatcher(config).match(query, library.gestures)
    print(json.dumps(result.to_response(), indent=2))
    for name, score in result.scores:
        logger.debug("  %-20s %.4f", name, score)


def _cmd_compare(args: argparse.Namespace) -> None:
    """Handle ``signbank compare``."""
    from signbank.matcher import compare_samples

    score = compare_samples(_read_hands(args.first), _read_hands(args.second))
    print(f"{score:.4f}")


def _cmd_quality(args: argparse.Namespace) -> None:
    """Handle ``signbank quality``."""
    from signbank.persistence import load_library
    from signbank.quality import evaluate_quality

    library = load_library(args.library)
    gestures = [library.find_gesture(args.gesture)] if args.gesture else library.gestures
    if not gestures:
        print("No gestures in library.")
        return

    for gesture in gestures:
        report = evaluate_quality(gesture, minimum_samples=args.min_samples)
        ready = "ready" if report.is_ready else "not ready"
        print(
            f"  {gesture.name:20s}  score={report.quality_score:5.1f}  "
            f"validated={report.validated_samples}/{report.total_samples}  "
            f"avg_conf={report.average_confidence:.2f}  {ready}"
        )


def _cmd_stats(args: argparse.Namespace) -> None:
    """Handle ``signbank stats``."""
    from signbank.persistence import load_library
    from signbank.quality import library_statistics

    library = load_library(args.library)
    print(json.dumps(library_statistics(library.gestures), indent=2))


def _cmd_import(args: argparse.Namespace) -> None:
    """Handle ``signbank import``."""
    from signbank.library import GestureLibrary
    from signbank.persistence import load_library, save_library

    if Path(args.library).exists():
        library = load_library(args.library)
    else:
        library = GestureLibrary()

    sample = library.import_sample(args.label, _read_json(args.landmarks), args.confidence)
    save_library(library, args.library)
    gesture = library.get_gesture(sample.gesture_id)
    print(f"Imported sample {sample.sample_id} into gesture '{gesture.name}'")


def _cmd_serve(args: argparse.Namespace) -> None:
    """Handle ``signbank serve``."""
    from signbank.server import create_app

    app = create_app(library_path=args.library)
    logger.info("Serving gesture detection on %s:%d", args.host, args.port)
    app.run(host=args.host, port=args.port)


_COMMANDS = {
    "detect": _cmd_detect,
    "compare": _cmd_compare,
    "quality": _cmd_quality,
    "stats": _cmd_stats,
    "import": _cmd_import,
    "serve": _cmd_serve,
}


def main(argv=None):
    """Entry point for ``signbank`` CLI."""
    from signbank.errors import SignbankError

    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        _COMMANDS[args.command](args)
    except (SignbankError, ValueError, KeyError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
