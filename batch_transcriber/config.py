"""
Runtime configuration for the batch transcriber.

Settings come from environment variables (optionally a ``.env`` file) and are
collected once at startup into a ``TranscriberConfig`` that is passed to every
component.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

SUPPORTED_EXTS = {".mp3", ".mp4", ".mpeg", ".mpga", ".m4a", ".wav", ".webm", ".ogg", ".flac"}

DEFAULT_CHUNK_DURATION = 300
DEFAULT_PARALLEL_REQUESTS = 3
DEFAULT_LANGUAGE_CODE = "ru"
DEFAULT_POLL_INTERVAL = 3.0
DEFAULT_REQUEST_TIMEOUT = 600.0


class ConfigError(ValueError):
    """Raised when the environment does not describe a usable configuration."""


@dataclass(frozen=True)
class TranscriberConfig:
    """
    Settings shared by the scanner, the batch driver and the API client.

    Attributes:
        api_key: AssemblyAI API key
        media_dir: Directory scanned for input files; transcripts are written here too
        temp_dir: Directory holding temporary chunk files
        chunk_duration: Chunk length in seconds
        parallel_requests: Maximum transcription requests in flight per batch
        language_code: Language code sent with every transcription request
        poll_interval: Seconds between transcript status polls
        request_timeout: Timeout in seconds for a single HTTP call
        log_level: Logging level name
    """
    api_key: str
    media_dir: Path = Path("media")
    temp_dir: Path = Path("temp")
    chunk_duration: int = DEFAULT_CHUNK_DURATION
    parallel_requests: int = DEFAULT_PARALLEL_REQUESTS
    language_code: str = DEFAULT_LANGUAGE_CODE
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: str = "INFO"


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _positive_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def load_config(env: Optional[Mapping[str, str]] = None, *, dotenv: bool = True) -> TranscriberConfig:
    """
    Build a ``TranscriberConfig`` from environment variables.

    Args:
        env: Mapping to read instead of ``os.environ`` (mainly for tests)
        dotenv: Load a ``.env`` file into the process environment first.
                Ignored when ``env`` is given.

    Returns:
        The validated configuration

    Raises:
        ConfigError: If the API key is missing or a numeric setting is invalid
    """
    if env is None:
        if dotenv:
            load_dotenv()
        env = os.environ

    api_key = (env.get("ASSEMBLYAI_API_KEY") or "").strip()
    if not api_key:
        raise ConfigError("ASSEMBLYAI_API_KEY is not set")

    return TranscriberConfig(
        api_key=api_key,
        media_dir=Path(env.get("MEDIA_DIR") or "media").expanduser(),
        temp_dir=Path(env.get("TEMP_DIR") or "temp").expanduser(),
        chunk_duration=_positive_int(env, "CHUNK_DURATION_SEC", DEFAULT_CHUNK_DURATION),
        parallel_requests=_positive_int(env, "PARALLEL_REQUESTS", DEFAULT_PARALLEL_REQUESTS),
        language_code=(env.get("LANGUAGE_CODE") or DEFAULT_LANGUAGE_CODE).strip(),
        poll_interval=_positive_float(env, "POLL_INTERVAL_SEC", DEFAULT_POLL_INTERVAL),
        request_timeout=_positive_float(env, "REQUEST_TIMEOUT_SEC", DEFAULT_REQUEST_TIMEOUT),
        log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
    )
