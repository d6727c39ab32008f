"""Split pasted text into title/body entries.

This is a best-effort heuristic rather than a grammar: blank lines separate
entries when there is more than one block, otherwise every line is an entry.
"""

import re
from dataclasses import dataclass

DELIMITERS = (" :: ", " - ", " | ")

_BLOCK_BREAK = re.compile(r"\n{2,}")


@dataclass(frozen=True)
class ImportEntry:
    title: str
    body: str


def split_bulk_import_line(line: str) -> ImportEntry:
    """Split a line on the first delimiter that leaves both sides non-empty."""
    trimmed = line.strip()
    for delimiter in DELIMITERS:
        index = trimmed.find(delimiter)
        if 0 < index < len(trimmed) - len(delimiter):
            left = trimmed[:index].strip()
            right = trimmed[index + len(delimiter):].strip()
            if left and right:
                return ImportEntry(title=left, body=right)
    return ImportEntry(title=trimmed, body="")


def _lines(text: str) -> list[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def split_bulk_import_entries(text: str) -> list[ImportEntry]:
    trimmed = text.replace("\r\n", "\n").strip()
    if not trimmed:
        return []

    blocks = [block.strip() for block in _BLOCK_BREAK.split(trimmed) if block.strip()]
    raw_entries = blocks if len(blocks) > 1 else _lines(trimmed)

    entries = []
    for raw in raw_entries:
        lines = _lines(raw)
        if not lines:
            continue
        first, rest = lines[0], lines[1:]
        head = split_bulk_import_line(first)
        body = "\n".join(part for part in (head.body, "\n".join(rest).strip()) if part)
        title = head.title or first
        entries.append(ImportEntry(title=title, body=body or title))
    return entries
