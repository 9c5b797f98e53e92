#!/usr/bin/env python3
import logging
from pathlib import Path
from typing import List, Optional

from .registry_io import write_text


class RunLog:
    """
    Line-oriented transcript of a publishing run.

    Every line is mirrored to a stdlib logger, so the transcript is an
    additional sink rather than a replacement for normal logging.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("types.registry.run")
        self._lines: List[str] = []

    def __call__(self, message: str) -> None:
        self.log(message)

    def log(self, message: str) -> None:
        """
        Append a line to the transcript.

        Args:
            message: Line to record
        """
        self._lines.append(message)
        self.logger.info(message)

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def result(self) -> str:
        """
        Returns:
            str: The full transcript, one line per logged message
        """
        return "\n".join(self._lines) + "\n" if self._lines else ""


def write_log(logs_dir: Path, name: str, transcript: str) -> Path:
    """
    Persist a run transcript into the logs directory.

    Args:
        logs_dir: Directory for log artifacts
        name: File name of the log artifact
        transcript: Text returned by RunLog.result()

    Returns:
        Path: The written log file
    """
    path = Path(logs_dir) / name
    write_text(path, transcript)
    logging.getLogger("types.registry.run").debug(f"Run log written to {path}")
    return path
