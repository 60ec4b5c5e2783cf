"""
Minimal AssemblyAI REST client.

Uploads a local audio file, requests a speaker-labelled transcript and polls
until the job reaches a terminal status.
"""

import json
import logging
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.assemblyai.com"
UPLOAD_CHUNK_SIZE = 5 * 1024 * 1024  # 5 MB


class TranscriptionError(RuntimeError):
    """Raised when AssemblyAI rejects a request or a transcript ends in error."""


@dataclass(frozen=True)
class Utterance:
    """One speaker turn. ``start`` is in milliseconds."""
    start: int
    speaker: str
    text: str

    def shifted(self, offset_ms: int) -> "Utterance":
        """Return a copy placed ``offset_ms`` later in the timeline."""
        if not offset_ms:
            return self
        return replace(self, start=self.start + offset_ms)


def raise_for_status_with_details(response: requests.Response, *, context: str) -> None:
    """Raise ``TranscriptionError`` with the service's error detail on HTTP errors."""
    try:
        response.raise_for_status()
    except requests.HTTPError as exc:
        detail: Optional[str] = None
        try:
            payload = response.json()
            if isinstance(payload, dict):
                detail = payload.get("error") or payload.get("message")
                if not detail:
                    detail = json.dumps(payload, ensure_ascii=False)
            else:
                detail = json.dumps(payload, ensure_ascii=False)
        except ValueError:
            text = (response.text or "").strip()
            if text:
                detail = text

        if detail:
            raise TranscriptionError(f"{context} failed ({response.status_code}): {detail}") from exc
        raise TranscriptionError(f"{context} failed ({response.status_code})") from exc


def stream_file(path: Path, chunk_size: int = UPLOAD_CHUNK_SIZE) -> Generator[bytes, None, None]:
    with path.open("rb") as handle:
        while True:
            block = handle.read(chunk_size)
            if not block:
                break
            yield block


def parse_utterances(payload: Dict[str, Any]) -> List[Utterance]:
    """Convert the ``utterances`` array of a completed transcript."""
    return [
        Utterance(
            start=int(u.get("start") or 0),
            speaker=str(u.get("speaker") or ""),
            text=u.get("text") or "",
        )
        for u in payload.get("utterances") or []
    ]


class AssemblyAIClient:
    """
    Blocking AssemblyAI client safe to share between worker threads.

    Each call builds its own request; the shared ``requests.Session`` only
    carries the authorization header and the connection pool.
    """

    def __init__(self,
                 api_key: str,
                 *,
                 language_code: str = "ru",
                 poll_interval: float = 3.0,
                 timeout: Optional[float] = 600.0,
                 base_url: str = DEFAULT_BASE_URL,
                 session: Optional[requests.Session] = None):
        """
        Args:
            api_key: AssemblyAI API key
            language_code: Language code sent with each transcript request
            poll_interval: Seconds to wait between status polls
            timeout: Timeout for each HTTP call (None waits forever)
            base_url: API root, overridable for tests or proxies
            session: Pre-built session (a new one is created if omitted)
        """
        self.language_code = language_code
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({
            "authorization": api_key,
            "user-agent": "batch-transcriber"
        })

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "AssemblyAIClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def upload(self, audio_path: Path) -> str:
        """Upload a local file and return its private ``upload_url``."""
        response = self.session.post(
            f"{self.base_url}/v2/upload",
            data=stream_file(audio_path),
            timeout=self.timeout
        )
        raise_for_status_with_details(response, context="Upload")
        data = response.json()
        if "upload_url" not in data:
            raise TranscriptionError(f"Upload response missing 'upload_url': {data}")
        return data["upload_url"]

    def request_transcript(self, audio_url: str) -> str:
        """Start a speaker-labelled transcription job and return its id."""
        payload = {
            "audio_url": audio_url,
            "speaker_labels": True,
            "language_code": self.language_code,
        }
        response = self.session.post(
            f"{self.base_url}/v2/transcript",
            json=payload,
            timeout=self.timeout
        )
        raise_for_status_with_details(response, context="Transcription request")
        data = response.json()
        if "id" not in data:
            raise TranscriptionError(f"Transcript response missing 'id': {data}")
        return data["id"]

    def wait_for_transcript(self, transcript_id: str) -> Dict[str, Any]:
        """
        Poll a transcript until it completes.

        Raises:
            TranscriptionError: If the transcript ends with status ``error``
        """
        endpoint = f"{self.base_url}/v2/transcript/{transcript_id}"
        while True:
            response = self.session.get(endpoint, timeout=self.timeout)
            raise_for_status_with_details(response, context="Polling transcript")
            payload = response.json()

            status = payload.get("status")
            if status == "completed":
                return payload
            if status == "error":
                raise TranscriptionError(payload.get("error") or "Unknown AssemblyAI error")

            logger.debug(f"Transcript {transcript_id} status={status}")
            time.sleep(self.poll_interval)

    def transcribe(self, audio_path: Path) -> List[Utterance]:
        """
        Transcribe a local audio file with speaker labels.

        Args:
            audio_path: Path to the audio (or video) file to send

        Returns:
            Utterances with chunk-local start times, in service order

        Raises:
            TranscriptionError: On HTTP errors, malformed responses or an error status
            requests.RequestException: On transport failures
        """
        logger.debug(f"Uploading {audio_path.name}")
        audio_url = self.upload(audio_path)
        transcript_id = self.request_transcript(audio_url)
        logger.debug(f"Transcript {transcript_id} queued for {audio_path.name}")
        payload = self.wait_for_transcript(transcript_id)
        utterances = parse_utterances(payload)
        logger.debug(f"Transcript {transcript_id} completed with {len(utterances)} utterance(s)")
        return utterances
