"""Utility functions for schedule sync."""

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import httpx

MAX_ERROR_BODY_LENGTH = 200


@contextmanager
def temp_file_path(directory: Path, suffix: str = "") -> Generator[Path, None, None]:
    """
    Context manager that provides a temp file path in ``directory`` and
    removes it on exit unless it has been moved away.

    Usage:
        with temp_file_path(target.parent, suffix=".tmp") as path:
            path.write_text(content)
            os.replace(path, target)

    Args:
        directory: Directory to create the file in (same filesystem as target)
        suffix: File suffix (e.g., ".tmp")

    Yields:
        Path to temporary file
    """
    fd, name = tempfile.mkstemp(suffix=suffix, dir=directory)
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


def atomic_write_text(target: Path, content: str) -> None:
    """Write ``content`` to ``target`` so readers never see a partial file."""
    target.parent.mkdir(parents=True, exist_ok=True)
    with temp_file_path(target.parent, suffix=".tmp") as tmp:
        tmp.write_text(content, encoding="utf-8")
        os.replace(tmp, target)


def safe_error_body(response: httpx.Response) -> str:
    """
    Short, single-line rendition of an error response body.

    Prefers the Google ``error.message`` / ``error_description`` fields and
    falls back to the raw text.
    """
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error_payload = payload.get("error")
        if isinstance(error_payload, dict):
            message = error_payload.get("message")
            if isinstance(message, str) and message.strip():
                return " ".join(message.split())[:MAX_ERROR_BODY_LENGTH]
        description = payload.get("error_description")
        if isinstance(description, str) and description.strip():
            return " ".join(description.split())[:MAX_ERROR_BODY_LENGTH]
        if isinstance(error_payload, str) and error_payload.strip():
            return " ".join(error_payload.split())[:MAX_ERROR_BODY_LENGTH]

    raw_text = response.text.strip()
    if raw_text:
        return " ".join(raw_text.split())[:MAX_ERROR_BODY_LENGTH]
    return "Request failed without an error payload"
