from __future__ import annotations

"""Spreadsheet column letter codec.

Column names are bijective base-26 numerals: digits A=1 .. Z=26 with no zero
digit, so index 25 is "Z" and index 26 is "AA". Indices are zero-based.
"""

__all__ = [
    "ASCII_LETTERS",
    "from_letters",
    "to_letters",
]

ASCII_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def to_letters(index: int) -> str:
    """Encode a zero-based column index as letters (0 -> "A", 76 -> "BY")."""
    if index < 0:
        raise ValueError(f"column index must be >= 0: {index}")
    letters: list[str] = []
    n = index + 1
    while n > 0:
        rem = n % 26
        if rem == 0:
            # no zero digit: 26 is "Z" and borrows from the next place
            letters.append("Z")
            n = n // 26 - 1
        else:
            letters.append(ASCII_LETTERS[rem - 1])
            n = n // 26
    return "".join(reversed(letters))


def from_letters(letters: str) -> int:
    """Decode column letters to a zero-based index.

    Lowercase letters count as uppercase; any other character is ignored.
    Input without letters decodes to -1.
    """
    num = 0
    for c in letters.upper():
        if c in ASCII_LETTERS:
            num = num * 26 + ASCII_LETTERS.index(c) + 1
    return num - 1
