import logging
import shutil
import subprocess
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

import fitz

from PageDiff.config import DEFAULT_DENSITY, PAGE_FILENAME_TEMPLATE
from PageDiff.exceptions import ConfigurationError, RasterizationError, TransportError

LOG = logging.getLogger(__name__)


def find_magick_command(preferred: Optional[str] = None) -> List[str]:
    """Return the command prefix used to call ImageMagick.

    ImageMagick 7 ships a single ``magick`` binary, older releases provide
    ``convert`` and ``compare`` directly.
    """
    if preferred:
        return [preferred]
    command = shutil.which('magick')
    if command:
        return [command]
    command = shutil.which('convert')
    if command:
        return [command]
    raise TransportError("No ImageMagick executable found in path. Please install ImageMagick")


@dataclass
class RasterizationResult:
    document: Path
    returncode: Optional[int]

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0

    def describe(self) -> str:
        if self.returncode is None:
            return "terminated by signal"
        return f"exit status: {self.returncode}"


class Rasterizer(ABC):
    """Renders a document into ``PAGE_FILENAME_TEMPLATE`` named page images."""

    @abstractmethod
    def rasterize(self, document: Union[str, Path], output_directory: Union[str, Path]) -> RasterizationResult:
        ...


class MagickRasterizer(Rasterizer):

    def __init__(self, density: int = DEFAULT_DENSITY, command: Optional[List[str]] = None):
        self.density = density
        self.command = command

    def build_args(self, document: Path, output_directory: Path) -> List[str]:
        command = self.command or find_magick_command()
        return command + [
            '-density', str(self.density),
            '-alpha', 'remove',
            '-alpha', 'off',
            str(document),
            str(output_directory / PAGE_FILENAME_TEMPLATE),
        ]

    def rasterize(self, document, output_directory):
        document = Path(document)
        args = self.build_args(document, Path(output_directory))
        LOG.debug("Running %s", " ".join(args))
        tic = time.perf_counter()
        try:
            completed = subprocess.run(args, stdout=subprocess.DEVNULL, check=False)
        except OSError as e:
            raise RasterizationError(f"could not run the rasterizer for '{document}': {e}") from e
        toc = time.perf_counter()
        LOG.debug("Rendering %s with ImageMagick performed in %0.4f seconds", document, toc - tic)
        returncode = completed.returncode if completed.returncode >= 0 else None
        return RasterizationResult(document=document, returncode=returncode)


class PyMuPdfRasterizer(Rasterizer):
    """Renders PDF pages in-process, without an external ImageMagick."""

    def __init__(self, density: int = DEFAULT_DENSITY):
        self.density = density

    def rasterize(self, document, output_directory):
        document = Path(document)
        output_directory = Path(output_directory)
        tic = time.perf_counter()
        try:
            fitz.TOOLS.set_aa_level(0)
            doc = fitz.open(str(document))
        except OSError as e:
            raise RasterizationError(f"could not open '{document}': {e}") from e
        except (RuntimeError, ValueError) as e:
            LOG.error("PyMuPDF could not read %s: %s", document, e)
            return RasterizationResult(document=document, returncode=1)

        with doc:
            for page_index, page in enumerate(doc.pages()):
                target = output_directory / (PAGE_FILENAME_TEMPLATE % page_index)
                try:
                    pix = page.get_pixmap(dpi=self.density, alpha=False)
                    pix.save(str(target))
                except Exception as e:
                    # MuPDF reports I/O faults with its own exception types
                    raise TransportError(f"could not write page image '{target}': {e}") from e
        toc = time.perf_counter()
        LOG.debug("Rendering %s with PyMuPDF performed in %0.4f seconds", document, toc - tic)
        return RasterizationResult(document=document, returncode=0)


def get_rasterizer(name: str, density: int = DEFAULT_DENSITY, magick_binary: Optional[str] = None) -> Rasterizer:
    if name == 'magick':
        return MagickRasterizer(density=density, command=[magick_binary] if magick_binary else None)
    if name == 'pymupdf':
        return PyMuPdfRasterizer(density=density)
    raise ConfigurationError(f"Unknown renderer '{name}'. Use 'magick' or 'pymupdf'.")
