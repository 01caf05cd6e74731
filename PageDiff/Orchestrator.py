import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

from PageDiff.ConfirmationGate import ConfirmationGate
from PageDiff.Differencer import ComparisonOutcome, Differencer, OutcomeTable, get_differencer
from PageDiff.FileSet import Side, enumerate_pages
from PageDiff.OutputLayout import OutputLayout, validate_inputs
from PageDiff.PagePairing import MismatchReport, match_pages
from PageDiff.Rasterizer import Rasterizer, get_rasterizer
from PageDiff.config import DEFAULT_FUZZ, PageDiffSettings, load_settings
from PageDiff.exceptions import PageDiffError, TransportError

LOG = logging.getLogger(__name__)

CONTINUE_QUESTION = "Do you want to continue?"


class RunState(Enum):
    INIT = "init"
    LEFT_RASTERIZED = "left rasterized"
    RIGHT_RASTERIZED = "right rasterized"
    ENUMERATED = "enumerated"
    MISMATCH_CHECK = "mismatch check"
    COMPARING = "comparing"
    DONE = "done"
    ABORTED = "aborted"
    FAILED = "failed"


@dataclass(frozen=True)
class PairFailure:
    index: int
    name: str
    detail: str

    def describe(self) -> str:
        return f"failure at entry #{self.index} '{self.name}', {self.detail}"


@dataclass
class RunReport:
    status: RunState = RunState.INIT
    compared: int = 0
    failure: Optional[PairFailure] = None
    mismatch: Optional[MismatchReport] = None
    outcomes: List[Tuple[int, str, ComparisonOutcome]] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """A declined continuation is not an error, only a real failure is."""
        return self.status in (RunState.DONE, RunState.ABORTED)


class ComparisonOrchestrator:
    """Runs rasterization, pairing and per-page comparison for two documents.

    Stages run strictly one after another. Rasterizer and enumeration errors
    propagate as exceptions; the first hard comparison failure ends the run
    with a ``FAILED`` report.
    """

    def __init__(
        self,
        rasterizer: Rasterizer,
        differencer: Differencer,
        gate: ConfirmationGate,
        fuzz: int = DEFAULT_FUZZ,
        outcome_table: OutcomeTable = None,
    ):
        self.rasterizer = rasterizer
        self.differencer = differencer
        self.gate = gate
        self.fuzz = fuzz
        self.outcome_table = outcome_table or OutcomeTable()
        self.state = RunState.INIT

    def _enter(self, state: RunState):
        LOG.debug("State %s -> %s", self.state.value, state.value)
        self.state = state

    def _rasterize(self, label: str, document: Path, directory: Path):
        LOG.info("Executing %s-side conversion...", label)
        try:
            result = self.rasterizer.rasterize(document, directory)
        except TransportError:
            self._enter(RunState.FAILED)
            raise
        if result.succeeded:
            LOG.info("...Done, %s", result.describe())
        else:
            LOG.warning("...Done, %s", result.describe())

    def run(self, left_file: Union[str, Path], right_file: Union[str, Path], layout: OutputLayout) -> RunReport:
        self.state = RunState.INIT
        report = RunReport()

        self._rasterize("left", Path(left_file), layout.left_dir)
        self._enter(RunState.LEFT_RASTERIZED)
        self._rasterize("right", Path(right_file), layout.right_dir)
        self._enter(RunState.RIGHT_RASTERIZED)

        try:
            left_pages = enumerate_pages(layout.left_dir, Side.LEFT)
            right_pages = enumerate_pages(layout.right_dir, Side.RIGHT)
        except PageDiffError:
            self._enter(RunState.FAILED)
            raise
        self._enter(RunState.ENUMERATED)
        LOG.info("Found %d left-side and %d right-side pages", len(left_pages), len(right_pages))

        pairing = match_pages(left_pages, right_pages)
        if pairing.counts_differ:
            self._enter(RunState.MISMATCH_CHECK)
            report.mismatch = pairing.mismatch
            LOG.warning(pairing.mismatch.describe())
            if not self.gate.confirm(CONTINUE_QUESTION):
                LOG.info("Aborting.")
                self._enter(RunState.ABORTED)
                report.status = RunState.ABORTED
                return report

        self._enter(RunState.COMPARING)
        LOG.info("Starting comparison...")
        n = 1
        for pair in pairing.pairs:
            artifact_path = layout.diff_dir / pair.name
            try:
                code = self.differencer.compare(pair.left.path, pair.right.path, self.fuzz, artifact_path)
                outcome = self.outcome_table.classify(code)
                detail = "terminated by signal" if code is None else f"exit status: {code}"
            except TransportError as e:
                outcome = ComparisonOutcome.HARD_FAILURE
                detail = str(e)
            report.compared = n
            report.outcomes.append((n, pair.name, outcome))

            if outcome is ComparisonOutcome.HARD_FAILURE:
                report.failure = PairFailure(index=n, name=pair.name, detail=detail)
                self._enter(RunState.FAILED)
                report.status = RunState.FAILED
                LOG.error(report.failure.describe())
                return report
            n += 1

        self._enter(RunState.DONE)
        report.status = RunState.DONE
        report.compared = n - 1
        LOG.info("Done, number of pairs processed: %d", n - 1)
        return report


def compare_documents(
    left_file: Union[str, Path],
    right_file: Union[str, Path],
    out_dir: Union[str, Path],
    gate: ConfirmationGate,
    settings: Optional[PageDiffSettings] = None,
    rasterizer: Optional[Rasterizer] = None,
    differencer: Optional[Differencer] = None,
    clear_output: bool = True,
    clear_gate: Optional[ConfirmationGate] = None,
) -> RunReport:
    """Validate inputs, prepare the output layout and run a full comparison.

    Returns an ``ABORTED`` report without rendering anything when the gate
    refuses to clear non-empty output directories. ``clear_gate`` answers
    that question when given, ``gate`` otherwise.
    """
    settings = settings or load_settings()
    validate_inputs(left_file, right_file, out_dir)
    rasterizer = rasterizer or get_rasterizer(settings.renderer, settings.density, settings.magick_binary)
    differencer = differencer or get_differencer(settings.differ, settings.magick_binary, settings.ssim_threshold)

    layout = OutputLayout(out_dir)
    if clear_output:
        if not layout.prepare(clear_gate or gate):
            return RunReport(status=RunState.ABORTED)
    else:
        layout.create()

    orchestrator = ComparisonOrchestrator(
        rasterizer,
        differencer,
        gate,
        fuzz=settings.fuzz,
        outcome_table=OutcomeTable.from_codes(settings.matched_codes, settings.hard_failure_codes),
    )
    return orchestrator.run(left_file, right_file, layout)
