import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional

import cv2
import numpy as np
from skimage import metrics

from PageDiff.config import DEFAULT_SSIM_THRESHOLD, HARD_FAILURE_EXIT_CODES, MATCHED_EXIT_CODES
from PageDiff.exceptions import ConfigurationError, TransportError

LOG = logging.getLogger(__name__)

# exit codes of ImageMagick compare, also used by SsimDifferencer
SIMILAR = 0
DISSIMILAR = 1
ERROR = 2


class ComparisonOutcome(Enum):
    MATCHED = "matched"
    TOLERATED_DIFFERENCE = "tolerated difference"
    HARD_FAILURE = "hard failure"


@dataclass(frozen=True)
class OutcomeTable:
    """Maps raw differencer exit codes to a ``ComparisonOutcome``.

    A missing status (``None``) is always a hard failure. Codes that are
    neither matched nor hard failures count as tolerated differences.
    """

    matched_codes: FrozenSet[int] = frozenset(MATCHED_EXIT_CODES)
    hard_failure_codes: FrozenSet[int] = frozenset(HARD_FAILURE_EXIT_CODES)

    @classmethod
    def from_codes(cls, matched_codes: Iterable[int], hard_failure_codes: Iterable[int]) -> "OutcomeTable":
        return cls(frozenset(matched_codes), frozenset(hard_failure_codes))

    def classify(self, code: Optional[int]) -> ComparisonOutcome:
        if code is None or code in self.hard_failure_codes:
            return ComparisonOutcome.HARD_FAILURE
        if code in self.matched_codes:
            return ComparisonOutcome.MATCHED
        return ComparisonOutcome.TOLERATED_DIFFERENCE


class Differencer(ABC):
    """Compares two page images and writes a difference artifact."""

    @abstractmethod
    def compare(self, left_image: Path, right_image: Path, fuzz: int, artifact_path: Path) -> Optional[int]:
        """Return the exit code of the comparison, ``None`` if there is none."""


def find_compare_command(preferred: Optional[str] = None) -> List[str]:
    command = preferred or shutil.which('magick')
    if command and Path(command).stem.lower() == 'magick':
        return [command, 'compare']
    if command:
        # legacy ImageMagick 6 layout, compare lives next to convert
        sibling = Path(command).with_name('compare' + Path(command).suffix)
        if sibling.exists():
            return [str(sibling)]
    command = shutil.which('compare')
    if command:
        return [command]
    raise TransportError("No ImageMagick compare executable found in path. Please install ImageMagick")


class MagickDifferencer(Differencer):

    def __init__(self, command: Optional[List[str]] = None):
        self.command = command

    def build_args(self, left_image, right_image, fuzz, artifact_path) -> List[str]:
        command = self.command or find_compare_command()
        return command + ['-fuzz', str(fuzz), str(left_image), str(right_image), str(artifact_path)]

    def compare(self, left_image, right_image, fuzz, artifact_path):
        args = self.build_args(left_image, right_image, fuzz, artifact_path)
        LOG.debug("Running %s", " ".join(args))
        try:
            completed = subprocess.run(args, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL, check=False)
        except OSError as e:
            raise TransportError(f"could not run the differencer: {e}") from e
        if completed.returncode < 0:
            return None
        return completed.returncode


class SsimDifferencer(Differencer):
    """Structural similarity comparison done in-process with OpenCV and scikit-image.

    ``fuzz`` is ignored; the tolerance is ``threshold``, between 0.0 and 1.0.
    The artifact is the right image with differing regions outlined in red.
    """

    def __init__(self, threshold: float = DEFAULT_SSIM_THRESHOLD):
        self.threshold = threshold

    def compare(self, left_image, right_image, fuzz, artifact_path):
        left = cv2.imread(str(left_image))
        right = cv2.imread(str(right_image))
        if left is None or right is None:
            LOG.warning("Could not load %s or %s", left_image, right_image)
            return ERROR
        if left.shape != right.shape:
            LOG.warning("Image dimensions are different: %s vs %s", left.shape, right.shape)
            return ERROR

        if np.array_equal(left, right):
            self._write(artifact_path, right)
            return SIMILAR

        gray_left = cv2.cvtColor(left, cv2.COLOR_BGR2GRAY)
        gray_right = cv2.cvtColor(right, cv2.COLOR_BGR2GRAY)
        try:
            score, diff = metrics.structural_similarity(gray_left, gray_right, full=True)
        except ValueError as e:
            # pages smaller than the SSIM window cannot be scored
            LOG.warning("Could not compare %s and %s: %s", left_image, right_image, e)
            return ERROR
        diff = (diff * 255).astype("uint8")
        thresh = cv2.threshold(diff, 0, 255, cv2.THRESH_BINARY_INV | cv2.THRESH_OTSU)[1]
        contours, _ = cv2.findContours(thresh, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

        artifact = right.copy()
        for contour in contours:
            x, y, w, h = cv2.boundingRect(contour)
            cv2.rectangle(artifact, (x, y), (x + w, y + h), (0, 0, 255), 2)
        self._write(artifact_path, artifact)

        LOG.debug("SSIM score for %s: %0.6f", Path(left_image).name, score)
        return SIMILAR if score >= (1.0 - self.threshold) else DISSIMILAR

    @staticmethod
    def _write(artifact_path, image):
        if not cv2.imwrite(str(artifact_path), image):
            raise TransportError(f"could not write difference image '{artifact_path}'")


def get_differencer(name: str, magick_binary: Optional[str] = None,
                    ssim_threshold: float = DEFAULT_SSIM_THRESHOLD) -> Differencer:
    if name == 'magick':
        return MagickDifferencer(command=find_compare_command(magick_binary) if magick_binary else None)
    if name == 'ssim':
        return SsimDifferencer(threshold=ssim_threshold)
    raise ConfigurationError(f"Unknown differ '{name}'. Use 'magick' or 'ssim'.")
