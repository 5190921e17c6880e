from __future__ import annotations

import math
import os
from typing import Optional, TextIO

import numpy as np


class InstanceFormatError(ValueError):
    """Malformed instance file; carries the offending line (1-based) and token."""

    def __init__(self, message: str, path: str = '<string>', line: Optional[int] = None,
                 token: Optional[str] = None):
        self.path = path
        self.line = line
        self.token = token
        location = path if line is None else f"{path}:{line}"
        super().__init__(f"{location}: {message}")


def _parse_float(token: str, path: str, line: int) -> float:
    try:
        value = float(token)
    except ValueError:
        raise InstanceFormatError(f"malformed coordinate {token!r}", path, line, token) from None
    if not math.isfinite(value):
        raise InstanceFormatError(f"non-finite coordinate {token!r}", path, line, token)
    return value


def parse_instance(text: str, path: str = '<string>') -> np.ndarray:
    """
    Parse an instance: a first line holding the point count N (further tokens
    ignored), then N lines of `x y`.

    Returns:
        A float64 numpy array of shape (N, 2).
    """
    lines = text.splitlines()
    if not lines or not lines[0].split():
        raise InstanceFormatError("missing point count", path, 1)
    count_token = lines[0].split()[0]
    try:
        n = int(count_token)
    except ValueError:
        raise InstanceFormatError(f"malformed point count {count_token!r}", path, 1, count_token) from None
    if n < 0:
        raise InstanceFormatError(f"negative point count {n}", path, 1, count_token)

    points = np.empty((n, 2), dtype=np.float64)
    for i in range(n):
        line_number = i + 2
        if i + 1 >= len(lines):
            raise InstanceFormatError(f"expected {n} points, found {i}", path, line_number)
        parts = lines[i + 1].split()
        if len(parts) < 2:
            token = parts[0] if parts else None
            raise InstanceFormatError("expected two coordinates", path, line_number, token)
        points[i, 0] = _parse_float(parts[0], path, line_number)
        points[i, 1] = _parse_float(parts[1], path, line_number)

    for extra, line in enumerate(lines[n + 1:], start=n + 2):
        if line.strip():
            raise InstanceFormatError(f"expected {n} points, found more", path, extra, line.split()[0])
    return points


def read_instance(path: str) -> np.ndarray:
    """Read and parse an instance file. A missing file raises FileNotFoundError."""
    with open(path, 'r') as f:
        return parse_instance(f.read(), os.fspath(path))


def format_solution(length: float, tour) -> str:
    """Two-line solution text: `<length> 0` then the visiting order."""
    return f"{length} 0\n" + "".join(f"{int(node)} " for node in tour) + "\n"


def write_solution(length: float, tour, path: str = 'solution', stream: Optional[TextIO] = None) -> str:
    """Write the solution to `path` and, if given, to `stream`; returns the text written."""
    text = format_solution(length, tour)
    if stream is not None:
        stream.write(text)
    with open(path, 'w') as f:
        f.write(text)
    return text
