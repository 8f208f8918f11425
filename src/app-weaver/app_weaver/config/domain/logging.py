"""Logging and transcript configuration model."""

from pathlib import Path

from pydantic import BaseModel


class LoggingConfig(BaseModel, frozen=True):
    capture_transcripts: bool = False
    transcript_dir: Path = Path("./transcripts")
