"""
Match collector

Runs every pattern of a PatternTable over the full text and records each
occurrence as a RawMatch. Matches of one pattern never overlap each other
(standard global match semantics); matches of different patterns may.
"""

from typing import List, Optional

from ..models.patterns import RawMatch
from .patterns import PatternTable
from .log import LOG


class MatchCollector:
    """
    Produces raw, possibly overlapping matches for a text

    Pure: holds only the pattern table.
    """

    def __init__(self, table: Optional[PatternTable] = None) -> None:
        self.table = table if table is not None else PatternTable()

    def matches_collect(self, text: str) -> List[RawMatch]:
        """
        Collect every occurrence of every pattern

        Args:
            text: Source text

        Returns:
            RawMatches in table order, then in text order per pattern.
            Groups that did not participate in a match are recorded as "".

        Example:
            >>> MatchCollector().matches_collect("**a**")
            [RawMatch(start=0, end=5, groups=('**', 'a', '**'), ...),
             RawMatch(start=0, end=4, groups=('*', '*a', '*'), ...)]
        """
        matches: List[RawMatch] = []

        for pattern in self.table:
            count = 0
            for match in pattern.regex.finditer(text):
                # Zero-width matches carry no syntax to render
                if match.end() == match.start():
                    continue
                groups = tuple(g if g is not None else '' for g in match.groups())
                matches.append(RawMatch(
                    start=match.start(),
                    end=match.end(),
                    groups=groups,
                    category=pattern.category,
                    priority=pattern.priority,
                    pattern=pattern,
                ))
                count += 1
            if count:
                LOG(f"Pattern '{pattern.name}' matched {count} time(s)", level=3)

        return matches
