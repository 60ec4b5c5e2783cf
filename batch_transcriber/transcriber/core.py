"""
Core transcription functionality: batch driver and transcript writer.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Dict, List, Protocol, Sequence, Tuple

from ..config import TranscriberConfig
from .audio import Chunk, chunk_count, cleanup_chunks, duration_seconds, split_into_chunks
from .client import Utterance
from .progress import ProgressCallback, null_progress

logger = logging.getLogger(__name__)


class SupportsTranscribe(Protocol):
    def transcribe(self, audio_path: Path) -> List[Utterance]: ...


def format_timestamp(ms: int) -> str:
    """MM:SS below one hour, HH:MM:SS otherwise (zero-padded)."""
    total_seconds = int(ms // 1000)
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def render_transcript(utterances: Sequence[Utterance]) -> str:
    """Render utterances as ``[ts] Speaker X:`` blocks separated by blank lines."""
    blocks = [
        f"[{format_timestamp(u.start)}] Speaker {u.speaker}:\n{u.text}\n\n"
        for u in utterances
    ]
    return "".join(blocks).rstrip()


def write_transcript(utterances: Sequence[Utterance], txt_path: Path) -> None:
    """
    Write utterances to a plain-text transcript, replacing any existing file.

    Args:
        utterances: Utterances in chronological order
        txt_path: Output text file path
    """
    logger.info(f"Writing transcript to {txt_path}")
    txt_path.write_text(render_transcript(utterances), encoding="utf-8")


def _transcribe_chunk(client: SupportsTranscribe, chunk: Chunk) -> Tuple[int, List[Utterance]]:
    utterances = client.transcribe(chunk.path)
    return chunk.index, [u.shifted(chunk.offset_ms) for u in utterances]


def transcribe_chunks(
    chunks: Sequence[Chunk],
    client: SupportsTranscribe,
    parallel_requests: int,
    progress: ProgressCallback = null_progress
) -> List[Utterance]:
    """
    Transcribe chunks in sequential batches and merge them chronologically.

    Each batch of up to ``parallel_requests`` chunks runs concurrently and is
    joined before the next batch starts. Results are re-ordered by chunk
    index, so completion order inside a batch does not matter.

    Args:
        chunks: Chunks in index order
        client: Object exposing ``transcribe(path) -> List[Utterance]``
        parallel_requests: Batch size / maximum requests in flight
        progress: Callback for progress updates

    Returns:
        All utterances with whole-file timestamps

    Raises:
        Exception: The first failure of a batch; later batches are not started
    """
    total = len(chunks)
    results: List[Tuple[int, List[Utterance]]] = []

    for first in range(0, total, parallel_requests):
        batch = chunks[first:first + parallel_requests]
        last = first + len(batch)
        msg = f"Processing chunks {first + 1}-{last}/{total}"
        logger.info(msg)
        progress({"step": "transcribe", "pct": 20 + 60 * first / total, "msg": msg})

        with ThreadPoolExecutor(max_workers=len(batch)) as pool:
            futures = [pool.submit(_transcribe_chunk, client, chunk) for chunk in batch]
            for future in as_completed(futures):
                results.append(future.result())

    results.sort(key=lambda r: r[0])

    merged: List[Utterance] = []
    for _, utterances in results:
        merged.extend(utterances)
    return merged


def transcribe_file(
    media_path: Path,
    output_path: Path,
    *,
    client: SupportsTranscribe,
    config: TranscriberConfig,
    progress: ProgressCallback = null_progress
) -> Dict[str, Any]:
    """
    Transcribe one media file and write its speaker-labelled transcript.

    Files no longer than ``config.chunk_duration`` are sent in a single
    request. Longer files are split into chunks under ``config.temp_dir``,
    transcribed in batches and merged; the chunk files are deleted whether
    or not transcription succeeds.

    Args:
        media_path: Path to the audio or video file
        output_path: Destination ``.txt`` file (overwritten)
        client: Transcription client
        config: Run configuration
        progress: Callback for progress updates

    Returns:
        Dictionary with status, output path, counts and processing time
    """
    start_time = time.time()

    try:
        progress({"step": "probe", "pct": 0, "msg": f"Probing {media_path.name}"})
        duration = duration_seconds(media_path)
        count = chunk_count(duration, config.chunk_duration)
        logger.debug(f"{media_path.name}: {duration:.1f}s, {count} chunk(s)")

        if count == 1:
            progress({"step": "upload", "pct": 10, "msg": "Uploading"})
            logger.info("Uploading...")
            utterances = client.transcribe(media_path)
        else:
            msg = f"Splitting into {count} chunks"
            progress({"step": "split", "pct": 10, "msg": msg})
            logger.info(msg)
            chunks = split_into_chunks(
                media_path,
                config.chunk_duration,
                config.temp_dir,
                duration=duration
            )
            try:
                utterances = transcribe_chunks(
                    chunks,
                    client,
                    config.parallel_requests,
                    progress=progress
                )
            finally:
                progress({"step": "cleanup", "pct": 85, "msg": "Removing chunk files"})
                cleanup_chunks(chunks)

        progress({"step": "write", "pct": 90, "msg": "Writing transcript"})
        write_transcript(utterances, output_path)

        processing_time = time.time() - start_time
        logger.info(f"Finished {media_path.name} in {processing_time:.1f}s")
        progress({"step": "done", "pct": 100, "msg": f"Completed in {processing_time:.1f}s"})

        return {
            "status": "success",
            "output_path": str(output_path),
            "chunk_count": count,
            "utterance_count": len(utterances),
            "processing_time": processing_time
        }

    except Exception as e:
        error_msg = f"Error processing {media_path}: {e}"
        logger.error(error_msg)
        progress({"step": "error", "pct": None, "msg": error_msg})
        raise
