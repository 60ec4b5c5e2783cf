"""
Progress reporting for a single media file.

``transcribe_file`` emits one ``ProgressEvent`` per pipeline step; callers
pass a callback to observe them.
"""

import logging
from typing import Literal, TypedDict, Optional, Callable

logger = logging.getLogger(__name__)

Step = Literal["probe", "split", "upload", "transcribe",
               "write", "cleanup", "done", "error"]


class ProgressEvent(TypedDict):
    """
    Attributes:
        step: Pipeline step that just started (or "done"/"error")
        pct: Rough completion percentage, None on error
        msg: Human-readable detail
    """
    step: Step
    pct: Optional[float]
    msg: Optional[str]


ProgressCallback = Callable[[ProgressEvent], None]


def null_progress(_: ProgressEvent) -> None:
    pass


def log_progress(event: ProgressEvent) -> None:
    """Callback that mirrors events to the debug log."""
    pct = event["pct"]
    prefix = f"{pct:5.1f}%" if pct is not None else "  -  "
    logger.debug(f"{prefix} {event['step']}: {event['msg'] or ''}")
