"""Line splitting shared by every stage that reports line numbers.

Line breaks are the ones the YAML reader counts: `\\r\\n`, `\\r`, `\\n`,
`\\x85`, `\\u2028` and `\\u2029`. Every stage that reports a line uses
this definition.
"""

from __future__ import annotations

import re

LINE_BREAK_PATTERN = re.compile("\r\n|[\r\n\x85\u2028\u2029]")


def split_lines(text: str) -> list[str]:
    """Split `text` into lines without their breaks; a final break adds no line."""

    lines = LINE_BREAK_PATTERN.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def line_at(text: str, offset: int) -> int:
    """Return the 1-based line containing character `offset`."""

    return len(LINE_BREAK_PATTERN.findall(text, 0, offset)) + 1
