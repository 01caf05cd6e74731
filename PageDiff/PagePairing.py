from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from PageDiff.FileSet import PageEntry


@dataclass(frozen=True)
class PagePair:
    left: PageEntry
    right: PageEntry

    def __post_init__(self):
        if self.left.name != self.right.name:
            raise ValueError(
                f"Page pair names differ: '{self.left.name}' vs '{self.right.name}'"
            )

    @property
    def name(self) -> str:
        return self.left.name


@dataclass(frozen=True)
class MismatchReport:
    """Page count discrepancy between both sides."""

    left_count: int
    right_count: int
    unmatched_left: Tuple[str, ...] = ()
    unmatched_right: Tuple[str, ...] = ()

    def describe(self) -> str:
        message = (
            f"Left and right output file count does not match "
            f"({self.left_count} vs {self.right_count})."
        )
        if self.unmatched_left:
            message += f" Only left: {', '.join(self.unmatched_left)}."
        if self.unmatched_right:
            message += f" Only right: {', '.join(self.unmatched_right)}."
        return message


@dataclass
class PairingResult:
    pairs: List[PagePair] = field(default_factory=list)
    left_count: int = 0
    right_count: int = 0
    mismatch: Optional[MismatchReport] = None

    @property
    def counts_differ(self) -> bool:
        return self.left_count != self.right_count


def match_pages(left: Sequence[PageEntry], right: Sequence[PageEntry]) -> PairingResult:
    """Pair left and right pages by exact filename.

    Pairs follow the order of ``left``. Pages without a partner are left out
    of the pairs. Whether the sides differ is decided by the raw entry count
    only, so a run with duplicate or extra right-side entries is flagged even
    when every left page found a partner.
    """
    # first right entry wins for duplicate names
    right_by_name = {}
    for entry in right:
        right_by_name.setdefault(entry.name, entry)

    pairs = []
    for entry in left:
        partner = right_by_name.get(entry.name)
        if partner is not None:
            pairs.append(PagePair(entry, partner))

    result = PairingResult(pairs=pairs, left_count=len(left), right_count=len(right))
    if result.counts_differ:
        left_names = {entry.name for entry in left}
        result.mismatch = MismatchReport(
            left_count=len(left),
            right_count=len(right),
            unmatched_left=tuple(sorted(left_names - right_by_name.keys())),
            unmatched_right=tuple(sorted(right_by_name.keys() - left_names)),
        )
    return result
