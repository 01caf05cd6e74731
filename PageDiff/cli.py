import argparse
import logging
import sys

from PageDiff.ConfirmationGate import ConsoleGate, FixedAnswerGate
from PageDiff.Orchestrator import RunState, compare_documents
from PageDiff.config import load_settings
from PageDiff.exceptions import PageDiffError

LOG = logging.getLogger("PageDiff")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagediff",
        description="Render two documents to page images and create a difference image for every page pair.",
    )
    parser.add_argument("left_file", help="Left-side input PDF file")
    parser.add_argument("right_file", help="Right-side input PDF file")
    parser.add_argument("out_dir", nargs="?", default=".",
                        help="Output directory; if omitted, current directory is used")
    parser.add_argument("-y", "--yes", action="store_true",
                        help="Answer every question with yes (non-interactive runs)")
    parser.add_argument("--renderer", choices=["magick", "pymupdf"], default=None,
                        help="Page renderer, default from PAGEDIFF_RENDERER or 'magick'")
    parser.add_argument("--differ", choices=["magick", "ssim"], default=None,
                        help="Page differencer, default from PAGEDIFF_DIFFER or 'magick'")
    parser.add_argument("--density", type=int, default=None, help="Rendering resolution in DPI")
    parser.add_argument("--fuzz", type=int, default=None, help="Fuzz passed to the differencer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log external commands")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )

    settings = load_settings({
        "renderer": args.renderer,
        "differ": args.differ,
        "density": args.density,
        "fuzz": args.fuzz,
    })
    gate = FixedAnswerGate(True) if args.yes else ConsoleGate()

    try:
        report = compare_documents(args.left_file, args.right_file, args.out_dir, gate, settings=settings)
    except (PageDiffError, OSError) as e:
        LOG.error("Error: %s", e)
        return 1

    if report.status is RunState.FAILED:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
