"""Session activity engine: tail reader, record model, classifier, inspection."""

from __future__ import annotations

from .classifier import (
    RUNNING_WINDOW_MS,
    UNKNOWN_WINDOW_MS,
    Classification,
    Status,
    classify,
    is_active,
)
from .inspect import LastRecordInfo, SessionActivity, check_session, get_last_record_info
from .records import MessageRecord, OtherRecord, Record, parse_record
from .tail import TAIL_WINDOW_BYTES, TailResult, read_last_record

__all__ = [
    "RUNNING_WINDOW_MS",
    "TAIL_WINDOW_BYTES",
    "UNKNOWN_WINDOW_MS",
    "Classification",
    "LastRecordInfo",
    "MessageRecord",
    "OtherRecord",
    "Record",
    "SessionActivity",
    "Status",
    "TailResult",
    "check_session",
    "classify",
    "get_last_record_info",
    "is_active",
    "parse_record",
    "read_last_record",
]
