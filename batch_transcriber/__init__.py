"""Batch transcription of local media files through AssemblyAI."""

__version__ = "0.1.0"
