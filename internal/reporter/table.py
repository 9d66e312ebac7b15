# internal/reporter/table.py

from __future__ import annotations

import json
import sys
from typing import Any, List, Optional, Sequence, TextIO

_BOLD = "\033[1m"
_RESET = "\033[0m"


def _isatty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def render_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    stream: Optional[TextIO] = None,
    print_headers: bool = False,
) -> None:
    """
    Left-aligned columns separated by two spaces.

    Headers are shown on a terminal, or anywhere when print_headers is set.
    """
    stream = stream or sys.stdout
    tty = _isatty(stream)
    show_headers = print_headers or tty

    widths = [len(h) if show_headers else 0 for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    lines: List[str] = []
    if show_headers:
        cells = [h.ljust(w) for h, w in zip(headers, widths)]
        if tty:
            cells = [f"{_BOLD}{c}{_RESET}" for c in cells]
        lines.append("  ".join(cells).rstrip())

    for row in rows:
        lines.append("  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip())

    if lines:
        stream.write("\n".join(lines) + "\n")
    stream.flush()


def print_json(obj: Any, stream: Optional[TextIO] = None) -> None:
    """
    Prevent BrokenPipeError when piping JSON to tools like `head`.
    """
    stream = stream or sys.stdout
    try:
        stream.write(json.dumps(obj, indent=2, sort_keys=False) + "\n")
        stream.flush()
    except BrokenPipeError:
        try:
            stream.close()
        except Exception:
            pass
        raise SystemExit(0)
