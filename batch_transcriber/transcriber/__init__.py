"""
Domain logic for batch transcription through AssemblyAI.

This module provides a clean API for transcription operations while
encapsulating ffmpeg chunking and the HTTP client.

Public API:
- transcribe_file: Transcribe one media file to a text transcript
- AssemblyAIClient: REST client returning speaker-labelled utterances
- duration_seconds / split_into_chunks: ffprobe / ffmpeg helpers
"""

from .audio import Chunk, MediaToolError, duration_seconds, split_into_chunks, cleanup_chunks
from .client import AssemblyAIClient, TranscriptionError, Utterance
from .progress import ProgressEvent, ProgressCallback
from .core import transcribe_file, transcribe_chunks, format_timestamp, render_transcript, write_transcript

__all__ = [
    "transcribe_file",
    "transcribe_chunks",
    "format_timestamp",
    "render_transcript",
    "write_transcript",
    "AssemblyAIClient",
    "TranscriptionError",
    "Utterance",
    "ProgressEvent",
    "ProgressCallback",
    "Chunk",
    "MediaToolError",
    "duration_seconds",
    "split_into_chunks",
    "cleanup_chunks"
]
