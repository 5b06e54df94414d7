"""
Core data models for street name matching and aggregation.

Frozen dataclasses describe dictionary entries, candidates and match
results; the mutable aggregate containers are owned by NameAggregator.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional


class MatchKind(StrEnum):
    """Classification of a candidate against the dictionary."""
    EXACT = "exact"
    CLOSE = "close"
    AMBIGUOUS = "ambiguous"
    UNMATCHED = "unmatched"


@dataclass(frozen=True)
class CanonicalStreetName:
    """
    A street name from the reference dictionary.

    ``text`` is the primary spelling as written in the dictionary,
    ``normalized`` its comparison key. ``variants`` are accepted alternate
    spellings of the same street; ``sources`` lists the dictionaries the
    entry was read from.
    """
    text: str
    normalized: str
    variants: tuple[str, ...] = ()
    sources: tuple[str, ...] = ()

    @property
    def forms(self) -> tuple[str, ...]:
        """All textual forms: the primary spelling followed by variants."""
        return (self.text, *self.variants)

    def merged(self, forms: tuple[str, ...], source: Optional[str] = None) -> 'CanonicalStreetName':
        """Return a copy with extra spellings (and source) folded in."""
        variants = list(self.variants)
        for form in forms:
            if form != self.text and form not in variants:
                variants.append(form)
        sources = self.sources
        if source is not None and source not in sources:
            sources = (*sources, source)
        return CanonicalStreetName(
            text=self.text,
            normalized=self.normalized,
            variants=tuple(variants),
            sources=sources,
        )


@dataclass(frozen=True)
class CandidateName:
    """A street name observed in input data."""
    text: str
    source: Optional[str] = None


@dataclass(frozen=True)
class MatchResult:
    """
    The result of classifying one candidate.

    ``distance`` is 0 for exact matches, the measured edit distance for close
    and ambiguous matches and None for unmatched names. ``ties`` holds the
    equidistant entries of an ambiguous match ordered by normalized form.
    ``verbatim`` tells whether an exact match was literally one of the
    entry's dictionary spellings.
    """
    candidate: CandidateName
    kind: MatchKind
    normalized: str = ""
    entry: Optional[CanonicalStreetName] = None
    distance: Optional[int] = None
    ties: tuple[CanonicalStreetName, ...] = ()
    verbatim: bool = False

    @property
    def is_match(self) -> bool:
        return self.kind in (MatchKind.EXACT, MatchKind.CLOSE)

    @property
    def suggestions(self) -> tuple[str, ...]:
        """Dictionary spellings offered for this candidate."""
        if self.entry is not None:
            return (self.entry.text,)
        return tuple(t.text for t in self.ties)


@dataclass
class StreetStats:
    """Hits collected for one canonical street."""
    entry: CanonicalStreetName
    exact: int = 0
    close: int = 0
    # Counter when names are counted, plain set otherwise
    names: Counter | set = field(default_factory=set)
    # candidate text -> exact or close
    kinds: dict[str, MatchKind] = field(default_factory=dict)

    @property
    def hits(self) -> int:
        return self.exact + self.close

    @property
    def exact_ratio(self) -> float:
        return self.exact / self.hits if self.hits else 0.0

    def name_counts(self) -> list[tuple[str, Optional[int]]]:
        """Distinct candidate names sorted by text, with counts when kept."""
        if isinstance(self.names, Counter):
            return sorted(self.names.items())
        return [(name, None) for name in sorted(self.names)]


@dataclass
class AggregateStats:
    """
    Running statistics of a NameAggregator.

    Global counters are always kept. ``streets``, ``unmatched`` and
    ``ambiguous`` are only filled when per-street statistics are enabled.
    Instances compare by value.
    """
    total: int = 0
    counts: Counter = field(default_factory=Counter)
    non_verbatim: int = 0
    streets: dict[str, StreetStats] = field(default_factory=dict)
    unmatched: Counter | set = field(default_factory=set)
    # candidate text -> (occurrences, suggested spellings)
    ambiguous: dict[str, tuple[int, tuple[str, ...]]] = field(default_factory=dict)

    def count(self, kind: MatchKind) -> int:
        return self.counts.get(kind, 0)

    @property
    def exact(self) -> int:
        return self.count(MatchKind.EXACT)

    @property
    def close(self) -> int:
        return self.count(MatchKind.CLOSE)

    @property
    def ambiguous_count(self) -> int:
        return self.count(MatchKind.AMBIGUOUS)

    @property
    def unmatched_count(self) -> int:
        return self.count(MatchKind.UNMATCHED)
