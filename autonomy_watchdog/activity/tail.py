"""Bounded tail reader for append-only JSONL event logs."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .records import Record, parse_record

logger = logging.getLogger(__name__)

# Only the last record matters, so never read more than this from the end.
TAIL_WINDOW_BYTES = 128 * 1024


@dataclass(frozen=True)
class TailResult:
    """Outcome of a tail read.

    ``record`` is the chronologically last structurally valid record, or
    ``None``; in that case ``reason`` says why (``missing``, ``empty``,
    ``unreadable``, ``no_parseable_line``).
    """

    record: Record | None
    reason: str = "ok"


def read_last_record(path: str | Path, window: int = TAIL_WINDOW_BYTES) -> TailResult:
    """Return the last decodable record in ``path`` without reading the whole file.

    Never raises: I/O and decode failures come back as an absent record with
    a reason string.
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            size = os.fstat(f.fileno()).st_size
            if size == 0:
                return TailResult(None, "empty")
            tail_size = min(window, size)
            f.seek(size - tail_size)
            data = f.read(tail_size)
    except FileNotFoundError:
        return TailResult(None, "missing")
    except OSError as exc:
        logger.debug("Could not read session log %s: %s", path, exc)
        return TailResult(None, "unreadable")

    lines = data.decode("utf-8", errors="replace").split("\n")
    for line in reversed(lines):
        line = line.strip()
        if not line:
            continue
        try:
            payload = json.loads(line)
        except (ValueError, RecursionError):
            # Window start or an in-flight write can cut a line in half;
            # pathological nesting or huge integers also land here.
            continue
        if not isinstance(payload, dict):
            continue
        return TailResult(parse_record(payload))

    logger.debug("No parseable line in last %d bytes of %s", len(data), path)
    return TailResult(None, "no_parseable_line")
