"""
Process-wide registry of HuggingFace inference pipelines.

Models are large and slow to load, so each ``(task, model)`` pair is
built at most once and shared by every caller. Loading is guarded by a
lock; concurrent first callers wait for the single load to finish.
"""

import logging
import threading
from typing import Any

from transformers import pipeline  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_pipelines: dict[tuple[str, str], Any] = {}


def load_pipeline(task: str, model: str) -> Any:
    """Return the shared pipeline for ``task``/``model``, loading it once."""
    key = (task, model)
    loaded = _pipelines.get(key)
    if loaded is not None:
        return loaded

    with _lock:
        if key not in _pipelines:
            logger.info("Loading %s model: %s …", task, model)
            _pipelines[key] = pipeline(task=task, model=model)
            logger.info("%s model loaded successfully.", task)
        return _pipelines[key]


def loaded_models() -> list[tuple[str, str]]:
    """Return the ``(task, model)`` pairs loaded so far."""
    return list(_pipelines)


def clear_pipelines() -> None:
    """Drop every loaded pipeline (used by tests and on shutdown)."""
    with _lock:
        _pipelines.clear()
