"""
Focus tracker

Maps cursor offsets to line indices and line indices to character ranges.
Both lookups are linear in the text length and run once per render.
"""

from typing import Tuple


class FocusTracker:
    """Line lookups over plain text"""

    @staticmethod
    def lineIndex_get(text: str, offset: int) -> int:
        """
        Line index of an offset

        Counts the newlines strictly before the offset. The offset is clamped
        into [0, len(text)].

        Args:
            text: Text to scan
            offset: Character offset

        Returns:
            0-based line index

        Example:
            >>> FocusTracker.lineIndex_get("a\\nb\\nc", 2)
            1
            >>> FocusTracker.lineIndex_get("a\\nb", 99)
            1
        """
        offset = min(max(offset, 0), len(text))
        return text.count('\n', 0, offset)

    @staticmethod
    def lineRange_get(text: str, line_index: int) -> Tuple[int, int]:
        """
        Character range of a line

        Args:
            text: Text to scan
            line_index: 0-based line index

        Returns:
            (start, end) with end excluding the trailing newline. A line index
            past the last line (or negative) yields the empty sentinel (0, 0).

        Example:
            >>> FocusTracker.lineRange_get("# H\\n\\n**B**", 2)
            (5, 10)
            >>> FocusTracker.lineRange_get("abc", 4)
            (0, 0)
        """
        if line_index < 0:
            return (0, 0)

        current_line = 0
        line_start = 0
        while current_line < line_index:
            newline = text.find('\n', line_start)
            if newline == -1:
                return (0, 0)
            line_start = newline + 1
            current_line += 1

        line_end = text.find('\n', line_start)
        if line_end == -1:
            line_end = len(text)
        return (line_start, line_end)
