"""
Overlap resolver

Orders raw matches by (start ascending, end descending, priority
descending) and greedily keeps every match that starts at or after the end
of the last kept one. The greedy sweep does not maximize coverage; it is
the precedence policy.
"""

from typing import Iterable, List, Tuple

from ..models.patterns import RawMatch, ResolvedRange
from .log import LOG


def match_sortKey(match: RawMatch) -> Tuple[int, int, int]:
    """
    Sort key for overlap resolution

    Longer matches sort first at the same start; at equal extent the
    higher priority sorts first. Remaining ties keep collection order.
    """
    return (match.start, -match.end, -match.priority)


class OverlapResolver:
    """Filters raw matches into a non-overlapping, ordered set"""

    def ranges_resolve(self, matches: Iterable[RawMatch]) -> List[ResolvedRange]:
        """
        Resolve overlapping matches

        Args:
            matches: RawMatches from any number of patterns

        Returns:
            ResolvedRanges ascending by start with
            ranges[i].end <= ranges[i + 1].start

        Example:
            For "***" the italic match (0, 3, priority 0) and the thematic
            break (0, 3, priority 1) tie on extent; the break is kept.
        """
        ordered = sorted(matches, key=match_sortKey)

        resolved: List[ResolvedRange] = []
        last_end = 0
        for match in ordered:
            if match.start >= last_end:
                resolved.append(match)
                last_end = match.end
            else:
                LOG(
                    f"Dropped {match.category.value} {match.start}..{match.end} "
                    f"(overlaps kept range ending at {last_end})",
                    level=3,
                )

        LOG(f"Resolved {len(resolved)} of {len(ordered)} matches", level=2)
        return resolved
