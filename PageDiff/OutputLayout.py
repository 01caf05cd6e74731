import logging
import os
from pathlib import Path
from typing import Union

from PageDiff.ConfirmationGate import ConfirmationGate
from PageDiff.config import DIFF_DIR_NAME, LEFT_DIR_NAME, RIGHT_DIR_NAME
from PageDiff.exceptions import ConfigurationError

LOG = logging.getLogger(__name__)

CLEAR_QUESTION = (
    "Some output directories are not empty. "
    "We will clear those if we continue. Do you agree?"
)


def validate_inputs(left_file: Union[str, Path], right_file: Union[str, Path], out_dir: Union[str, Path]):
    """Check the command line inputs before anything is written."""
    for label, path in (("left", Path(left_file)), ("right", Path(right_file))):
        try:
            exists = path.exists()
        except OSError as e:
            raise ConfigurationError(f"could not check {label} file: {e}") from e
        if not exists:
            raise ConfigurationError(f"{label} file does not exist")
        if not path.is_file():
            raise ConfigurationError(f"the {label} side is not a regular file")

    out_dir = Path(out_dir)
    try:
        if out_dir.exists() and not out_dir.is_dir():
            raise ConfigurationError("output is not a directory")
    except OSError as e:
        raise ConfigurationError(f"could not check output directory: {e}") from e


def _has_entries(directory: Path) -> bool:
    with os.scandir(directory) as iterator:
        return next(iterator, None) is not None


class OutputLayout:
    """The ``left/``, ``right/`` and ``diff/`` directories below one output root."""

    def __init__(self, root: Union[str, Path] = "."):
        self.root = Path(root)
        self.left_dir = self.root / LEFT_DIR_NAME
        self.right_dir = self.root / RIGHT_DIR_NAME
        self.diff_dir = self.root / DIFF_DIR_NAME

    @property
    def directories(self):
        return (self.left_dir, self.right_dir, self.diff_dir)

    def create(self):
        LOG.info("Creating output directories if necessary...")
        for directory in self.directories:
            directory.mkdir(parents=True, exist_ok=True)

    def is_empty(self) -> bool:
        try:
            return not any(_has_entries(directory) for directory in self.directories)
        except OSError as e:
            raise ConfigurationError(f"could not check output directories: {e}") from e

    def clear(self):
        """Remove all files of the three directories.

        Every directory is checked first; a non-regular entry anywhere aborts
        with ``ConfigurationError`` before a single file is removed.
        """
        files = []
        for directory in self.directories:
            with os.scandir(directory) as iterator:
                for entry in iterator:
                    if not entry.is_file(follow_symlinks=False):
                        raise ConfigurationError(
                            f"output directory '{directory}' contains non-regular file(s): {entry.name}"
                        )
                    files.append(Path(entry.path))
        LOG.info("Clearing output directories...")
        for path in files:
            path.unlink()

    def prepare(self, gate: ConfirmationGate) -> bool:
        """Create the directories and clear them with the gate's consent.

        Returns False when the gate declines clearing.
        """
        self.create()
        if self.is_empty():
            return True
        if not gate.confirm(CLEAR_QUESTION):
            LOG.info("Aborting.")
            return False
        self.clear()
        return True
