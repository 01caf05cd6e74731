"""Shared pytest fixtures for unit tests."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from PageDiff.Differencer import Differencer
from PageDiff.OutputLayout import OutputLayout
from PageDiff.Rasterizer import RasterizationResult, Rasterizer


class FakeRasterizer(Rasterizer):
    """Writes empty page files with the given names instead of rendering."""

    def __init__(self, pages: Dict[str, Sequence[str]], returncode: int = 0):
        self.pages = pages
        self.returncode = returncode
        self.calls: List[Tuple[Path, Path]] = []

    def rasterize(self, document, output_directory):
        document = Path(document)
        self.calls.append((document, Path(output_directory)))
        for name in self.pages.get(document.name, []):
            (Path(output_directory) / name).write_bytes(b"page")
        return RasterizationResult(document=document, returncode=self.returncode)


class ScriptedDifferencer(Differencer):
    """Returns a scripted exit code per page name, 0 if none is scripted."""

    def __init__(self, codes: Optional[Dict[str, Optional[int]]] = None, errors: Optional[Dict[str, Exception]] = None):
        self.codes = codes or {}
        self.errors = errors or {}
        self.calls: List[Tuple[Path, Path, int, Path]] = []

    def compare(self, left_image, right_image, fuzz, artifact_path):
        self.calls.append((Path(left_image), Path(right_image), fuzz, Path(artifact_path)))
        name = Path(left_image).name
        if name in self.errors:
            raise self.errors[name]
        Path(artifact_path).write_bytes(b"diff")
        return self.codes.get(name, 0)

    @property
    def compared_names(self) -> List[str]:
        return [left.name for left, _, _, _ in self.calls]


@pytest.fixture
def documents(tmp_path: Path) -> Tuple[Path, Path]:
    left = tmp_path / "left.pdf"
    right = tmp_path / "right.pdf"
    left.write_bytes(b"%PDF-1.4 left")
    right.write_bytes(b"%PDF-1.4 right")
    return left, right


@pytest.fixture
def layout(tmp_path: Path) -> OutputLayout:
    output = OutputLayout(tmp_path / "out")
    output.create()
    return output
