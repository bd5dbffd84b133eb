"""
Zero-shot topic classification for news articles.

Ranks a caller-supplied set of candidate labels for a text using an NLI
model (``facebook/bart-large-mnli`` by default), so the label set can
change without retraining.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from app.domain.market.entities import CategoryResult
from app.nlp.pipelines import load_pipeline
from app.nlp.sentiment import preprocess

logger = logging.getLogger(__name__)

_MODEL_NAME: str = "facebook/bart-large-mnli"
_TASK: str = "zero-shot-classification"

# BART's encoder tops out at 1024 tokens; characters are a cheap proxy.
_DEFAULT_MAX_CHARS: int = 2000


class TopicClassifier:
    """Zero-shot classifier over an arbitrary closed label set.

    Parameters
    ----------
    model_name : str, optional
        NLI model used by the zero-shot pipeline.
    max_chars : int, optional
        Input is cut to this many characters before inference.
    """

    def __init__(
        self,
        model_name: str = _MODEL_NAME,
        max_chars: int = _DEFAULT_MAX_CHARS,
    ) -> None:
        if max_chars < 1:
            raise ValueError("max_chars must be >= 1.")
        self._model_name = model_name
        self._max_chars = max_chars

    @property
    def model_name(self) -> str:
        return self._model_name

    def warm_up(self) -> None:
        """Load the model now instead of on the first request."""
        load_pipeline(_TASK, self._model_name)

    def classify(self, text: str, labels: Sequence[str]) -> CategoryResult:
        """Rank ``labels`` by how well they describe ``text``.

        Raises
        ------
        ValueError
            If *text* is blank or *labels* is empty.
        """
        if not text or not text.strip():
            raise ValueError("Input text must not be empty or blank.")
        if not labels:
            raise ValueError("labels must not be empty.")

        classifier = load_pipeline(_TASK, self._model_name)
        result: dict[str, Any] = classifier(
            preprocess(text)[: self._max_chars],
            candidate_labels=list(labels),
        )

        logger.debug(
            "Zero-shot: top=%s  score=%.4f", result["labels"][0], result["scores"][0]
        )
        return CategoryResult(
            labels=list(result["labels"]),
            scores=[float(s) for s in result["scores"]],
        )
