"""
Audio processing utilities: duration probing and chunk splitting with ffmpeg.
"""

import logging
import math
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


class MediaToolError(RuntimeError):
    """Raised when ffprobe or ffmpeg is missing, fails, or returns garbage."""


@dataclass(frozen=True)
class Chunk:
    """A temporary audio segment cut from a media file."""
    path: Path
    index: int
    offset_ms: int


def chunk_count(duration: float, chunk_duration: int) -> int:
    """Number of chunks needed to cover ``duration`` seconds (always at least 1)."""
    return max(1, math.ceil(duration / chunk_duration))


def chunk_offset_ms(index: int, chunk_duration: int) -> int:
    return index * chunk_duration * 1000


def duration_seconds(media_path: Path) -> float:
    """
    Get the duration in seconds of a media file using ffprobe.

    Args:
        media_path: Path to the media file

    Returns:
        Duration in seconds

    Raises:
        MediaToolError: If ffprobe is missing, fails, or prints an unparsable value
    """
    cmd = [
        "ffprobe", "-v", "error", "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1", str(media_path)
    ]

    try:
        result = subprocess.check_output(cmd, stderr=subprocess.PIPE).decode().strip()
        return float(result)
    except FileNotFoundError as e:
        logger.error("ffprobe not found on PATH")
        raise MediaToolError("ffprobe is not installed or not on PATH") from e
    except subprocess.CalledProcessError as e:
        logger.error(f"FFprobe error: {e.stderr.decode() if e.stderr else str(e)}")
        raise MediaToolError(f"Failed to get duration for {media_path}") from e
    except (ValueError, TypeError) as e:
        logger.error(f"Invalid duration format: {e}")
        raise MediaToolError(f"Failed to parse duration for {media_path}") from e


def extract_chunk(media_path: Path, chunk_path: Path, start: int, length: int) -> Path:
    """
    Cut ``length`` seconds starting at ``start`` out of a media file as MP3.

    Args:
        media_path: Path to the input video or audio file
        chunk_path: Output path for the MP3 segment (overwritten)
        start: Start offset in seconds
        length: Segment length in seconds

    Returns:
        Path to the written chunk
    """
    cmd = [
        "ffmpeg", "-y", "-i", str(media_path),
        "-ss", str(start), "-t", str(length),
        "-vn", "-acodec", "libmp3lame",
        str(chunk_path)
    ]

    try:
        subprocess.run(cmd, check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        return chunk_path
    except FileNotFoundError as e:
        logger.error("ffmpeg not found on PATH")
        raise MediaToolError("ffmpeg is not installed or not on PATH") from e
    except subprocess.CalledProcessError as e:
        logger.error(f"FFmpeg error: {e.stderr.decode() if e.stderr else str(e)}")
        raise MediaToolError(f"Failed to extract chunk at {start}s from {media_path}") from e


def split_into_chunks(
    media_path: Path,
    chunk_duration: int,
    temp_dir: Path,
    duration: Optional[float] = None
) -> List[Chunk]:
    """
    Split a media file into fixed-length MP3 chunks inside ``temp_dir``.

    Chunk ``i`` starts at ``i * chunk_duration`` seconds and is written to
    ``<stem>_chunk_<i>.mp3``. The returned list is in index order.

    Args:
        media_path: Path to the input video or audio file
        chunk_duration: Chunk length in seconds
        temp_dir: Directory for chunk files, created if missing
        duration: Known duration in seconds; probed with ffprobe when omitted

    Returns:
        Chunks ordered by index

    Raises:
        MediaToolError: If probing or any ffmpeg invocation fails. Chunks
            written before the failure are removed first.
    """
    if duration is None:
        duration = duration_seconds(media_path)
    count = chunk_count(duration, chunk_duration)

    temp_dir.mkdir(parents=True, exist_ok=True)

    chunks: List[Chunk] = []
    try:
        for i in range(count):
            start = i * chunk_duration
            chunk_path = temp_dir / f"{media_path.stem}_chunk_{i}.mp3"
            logger.debug(f"Extracting chunk {i + 1}/{count} of {media_path.name} at {start}s")
            # Registered before extraction so a partial file is also removed
            chunks.append(Chunk(chunk_path, i, chunk_offset_ms(i, chunk_duration)))
            extract_chunk(media_path, chunk_path, start, chunk_duration)
    except Exception:
        cleanup_chunks(chunks)
        raise

    return chunks


def cleanup_chunks(chunks: Sequence[Chunk]) -> None:
    """Delete chunk files that still exist."""
    for chunk in chunks:
        chunk.path.unlink(missing_ok=True)
    if chunks:
        logger.debug(f"Removed {len(chunks)} chunk file(s)")
