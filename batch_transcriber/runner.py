"""
Top-level driver: scan the media directory and transcribe each file in turn.

A failure in one file is logged and recorded; it never stops the run.
"""

import logging
import time
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .config import SUPPORTED_EXTS, TranscriberConfig
from .transcriber import AssemblyAIClient, ProgressCallback, transcribe_file
from .transcriber.core import SupportsTranscribe
from .transcriber.progress import log_progress

logger = logging.getLogger(__name__)


@dataclass
class FileResult:
    """Outcome of processing one media file."""
    media_path: Path
    output_path: Path
    status: str
    error: Optional[str] = None
    utterance_count: int = 0
    processing_time: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == "success"


@dataclass
class RunSummary:
    results: List[FileResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)


def output_path_for(media_path: Path) -> Path:
    """Transcript path next to the input: same stem, ``.txt`` suffix."""
    return media_path.with_suffix(".txt")


def find_media_files(media_dir: Path) -> List[Path]:
    """
    List supported media files directly inside ``media_dir``.

    The directory is created if missing. Files keep directory-listing order.
    """
    media_dir.mkdir(parents=True, exist_ok=True)
    return [p for p in media_dir.iterdir()
            if p.is_file() and p.suffix.lower() in SUPPORTED_EXTS]


def process_file(
    media_path: Path,
    *,
    client: SupportsTranscribe,
    config: TranscriberConfig,
    progress: ProgressCallback = log_progress
) -> FileResult:
    """Transcribe one file, converting any failure into an error result."""
    output_path = output_path_for(media_path)
    start_time = time.time()
    try:
        result = transcribe_file(
            media_path,
            output_path,
            client=client,
            config=config,
            progress=progress
        )
    except Exception as e:
        logger.error(f"  Error: {e}")
        logger.debug(traceback.format_exc())
        return FileResult(
            media_path=media_path,
            output_path=output_path,
            status="error",
            error=str(e),
            processing_time=time.time() - start_time
        )

    logger.info(f"  Saved: {output_path.name}")
    return FileResult(
        media_path=media_path,
        output_path=output_path,
        status="success",
        utterance_count=result.get("utterance_count", 0),
        processing_time=result.get("processing_time", 0.0)
    )


def process_media_files(
    config: TranscriberConfig,
    client: Optional[SupportsTranscribe] = None,
    progress: ProgressCallback = log_progress
) -> RunSummary:
    """
    Transcribe every supported file in ``config.media_dir``, one at a time.

    Args:
        config: Run configuration
        client: Transcription client; an ``AssemblyAIClient`` is built from
                ``config`` when omitted
        progress: Callback for per-file progress updates

    Returns:
        Summary with one result per discovered file
    """
    summary = RunSummary()

    media_files = find_media_files(config.media_dir)
    if not media_files:
        logger.info(f"No media files found in {config.media_dir}")
        return summary

    total = len(media_files)
    logger.info(f"Found {total} media file(s)")

    owned_client = None
    if client is None:
        owned_client = AssemblyAIClient(
            config.api_key,
            language_code=config.language_code,
            poll_interval=config.poll_interval,
            timeout=config.request_timeout
        )
        client = owned_client

    try:
        for current, media_path in enumerate(media_files, 1):
            logger.info(f"[{current}/{total}] {media_path.name}")
            summary.results.append(
                process_file(media_path, client=client, config=config, progress=progress)
            )
    finally:
        if owned_client is not None:
            owned_client.close()

    logger.info(f"All files processed: {summary.succeeded} succeeded, {summary.failed} failed")
    return summary
