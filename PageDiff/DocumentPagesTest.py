from pathlib import Path

from robot.api import logger
from robot.api.deco import keyword, library
from robot.libraries.BuiltIn import BuiltIn

from PageDiff.ConfirmationGate import FixedAnswerGate
from PageDiff.FileSet import Side, enumerate_pages
from PageDiff.Orchestrator import RunState, compare_documents
from PageDiff.PagePairing import match_pages
from PageDiff.config import load_settings


@library
class DocumentPagesTest:
    ROBOT_LIBRARY_VERSION = 1.0

    def __init__(self, renderer: str = None, differ: str = None, density: int = None, fuzz: int = None):
        """
        Initialize the DocumentPagesTest library.

        | =Arguments= | =Description= |
        | ``renderer`` | ``magick`` (ImageMagick) or ``pymupdf``. Default is taken from ``PAGEDIFF_RENDERER`` or ``magick``. |
        | ``differ`` | ``magick`` (ImageMagick compare) or ``ssim``. Default is taken from ``PAGEDIFF_DIFFER`` or ``magick``. |
        | ``density`` | Resolution in which documents are rendered. Default is 150. |
        | ``fuzz`` | Fuzz passed to the differencer. Default is 1000. |
        """
        self.overrides = {"renderer": renderer, "differ": differ, "density": density, "fuzz": fuzz}
        try:
            self.output_directory = Path(BuiltIn().get_variable_value("${OUTPUT DIR}"))
        except Exception:
            print("Robot Framework is not running")
            self.output_directory = Path.cwd()

    @keyword
    def compare_document_pages(
        self,
        left_document: str,
        right_document: str,
        output_dir: str = None,
        continue_on_page_count_mismatch: bool = True,
        clear_output: bool = True,
        fuzz: int = None,
    ):
        """Renders ``left_document`` and ``right_document`` and compares them page by page.

        A difference image is written for every page found on both sides.
        Fails at the first page pair the differencer reports as a hard failure.

        | =Arguments= | =Description= |
        | ``left_document`` | Path of the reference document |
        | ``right_document`` | Path of the candidate document |
        | ``output_dir`` | Root of the ``left``, ``right`` and ``diff`` directories. Default is ``${OUTPUT DIR}/pagediff`` |
        | ``continue_on_page_count_mismatch`` | Compare the common pages if the page counts differ. Otherwise the keyword stops without comparing and passes |
        | ``clear_output`` | Remove files left in the output directories by an earlier run |
        | ``fuzz`` | Overrides the library fuzz for this comparison |

        Returns the number of compared page pairs.

        Examples:
        | `Compare Document Pages`    reference.pdf    candidate.pdf
        | ${pairs}=    `Compare Document Pages`    reference.pdf    candidate.pdf    continue_on_page_count_mismatch=${False}
        """
        overrides = dict(self.overrides)
        if fuzz is not None:
            overrides["fuzz"] = fuzz
        settings = load_settings(overrides)
        if output_dir is None:
            output_dir = self.output_directory / "pagediff"

        gate = FixedAnswerGate(bool(continue_on_page_count_mismatch))
        report = compare_documents(
            left_document,
            right_document,
            output_dir,
            gate,
            settings=settings,
            clear_output=clear_output,
            clear_gate=FixedAnswerGate(True),
        )

        if report.mismatch is not None:
            logger.warn(report.mismatch.describe())
        if report.status is RunState.ABORTED:
            logger.info("Comparison aborted because the page counts differ")
        elif report.status is RunState.FAILED:
            raise AssertionError(f"The compared documents are different: {report.failure.describe()}")
        else:
            logger.info(f"Number of pairs processed: {report.compared}")
        return report.compared

    @keyword
    def page_counts_should_match(self, left_dir: str, right_dir: str):
        """Fails if the page image directories ``left_dir`` and ``right_dir`` hold a different number of pages."""
        pairing = match_pages(enumerate_pages(left_dir, Side.LEFT), enumerate_pages(right_dir, Side.RIGHT))
        if pairing.counts_differ:
            raise AssertionError(pairing.mismatch.describe())
