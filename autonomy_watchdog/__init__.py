"""autonomy-watchdog: decide whether agent subagent sessions are really still working."""

__version__ = "0.1.0"

from .activity import (
    Classification,
    MessageRecord,
    OtherRecord,
    SessionActivity,
    Status,
    TailResult,
    check_session,
    classify,
    get_last_record_info,
    is_active,
    read_last_record,
)

__all__ = [
    "__version__",
    "Classification",
    "MessageRecord",
    "OtherRecord",
    "SessionActivity",
    "Status",
    "TailResult",
    "check_session",
    "classify",
    "get_last_record_info",
    "is_active",
    "read_last_record",
]
