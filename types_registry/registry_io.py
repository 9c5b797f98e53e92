#!/usr/bin/env python3
import os
import json
import shutil
import logging
import tempfile
from pathlib import Path
from typing import Any

from .registry_errors import RegistryPublishError

logger = logging.getLogger("types.registry.io")


class RegistryIOError(RegistryPublishError):
    """Exception raised when output files cannot be written."""
    pass


def write_text(path: Path, content: str) -> None:
    """
    Write text to a file, replacing it atomically.

    Parent directories are created as needed.

    Args:
        path: Destination file
        content: Text to write
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(content)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
    except OSError as e:
        msg = f"Failed to write {path}: {e}"
        logger.error(msg)
        raise RegistryIOError(msg) from e
    logger.debug(f"Wrote {path}")


def write_json(path: Path, content: Any) -> None:
    """
    Serialize content as pretty-printed JSON and write it to path.

    Args:
        path: Destination file
        content: JSON-serializable value
    """
    try:
        text = json.dumps(content, indent=4) + "\n"
    except (TypeError, ValueError) as e:
        msg = f"Failed to serialize content for {path}: {e}"
        logger.error(msg)
        raise RegistryIOError(msg) from e
    write_text(path, text)


def clear_output_path(path: Path) -> None:
    """
    Remove a directory tree if present and recreate it empty.

    Args:
        path: Directory to clear
    """
    path = Path(path)
    try:
        if path.exists():
            logger.info(f"Clearing output directory {path}")
            shutil.rmtree(path)
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        msg = f"Failed to clear output directory {path}: {e}"
        logger.error(msg)
        raise RegistryIOError(msg) from e
