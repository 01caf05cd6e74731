import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Union

from PageDiff.exceptions import EnumerationError

LOG = logging.getLogger(__name__)


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class PageEntry:
    """One rendered page image on one side of the comparison."""

    name: str
    path: Path
    side: Side


def enumerate_pages(directory: Union[str, Path], side: Side) -> List[PageEntry]:
    """List all entries of ``directory`` as ``PageEntry`` objects.

    The order is the one returned by the operating system. If the directory
    or any of its entries cannot be accessed, an ``EnumerationError`` is
    raised and nothing is returned.
    """
    directory = Path(directory)
    try:
        with os.scandir(directory) as iterator:
            raw_entries = list(iterator)
    except OSError as e:
        raise EnumerationError(
            f"could not list the {side.value} page directory '{directory}': {e}"
        ) from e

    entries = []
    for raw_entry in raw_entries:
        try:
            raw_entry.stat()
        except OSError as e:
            raise EnumerationError(
                f"could not access some of the converted files: {e}"
            ) from e
        entries.append(PageEntry(name=raw_entry.name, path=Path(raw_entry.path), side=side))

    LOG.debug("Enumerated %d %s-side pages in %s", len(entries), side.value, directory)
    return entries
