#!/usr/bin/env python3
"""
Batch transcriber script: media files ➜ speaker-labelled text transcripts.

Drop audio/video files into ./media and run the script (no arguments) to get
``./media/<name>.txt`` next to every input.

Configuration is read from the environment or a .env file:
    ASSEMBLYAI_API_KEY        AssemblyAI key (required)
    CHUNK_DURATION_SEC        Chunk length for long files (default 300)
    PARALLEL_REQUESTS         Chunks transcribed at once (default 3)
    LANGUAGE_CODE             Spoken language (default ru)

Requirements:
- ffmpeg / ffprobe on PATH
- requests, python-dotenv
"""

import sys

from batch_transcriber.cli import main

if __name__ == "__main__":
    sys.exit(main())
