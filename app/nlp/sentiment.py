"""
Sentiment analysis service for financial news.

Wraps a HuggingFace ``sentiment-analysis`` pipeline. The default model,
``cardiffnlp/twitter-roberta-base-sentiment-latest``, emits
``positive`` / ``negative`` / ``neutral``; star-rating and SST-2 style
models are mapped too so the model can be swapped through settings.

This module is a **pure service class** with no HTTP endpoints.  It is
called by the inference adapter in the market infrastructure layer.

Label mapping
-------------
* ``positive``, ``4 stars``, ``5 stars``, ``LABEL_2`` → ``POSITIVE``
* ``negative``, ``1 star``, ``2 stars``, ``LABEL_0`` → ``NEGATIVE``
* ``neutral``, ``3 stars``, ``LABEL_1``               → ``NEUTRAL``

If the model returns an unknown label, an ``UnknownLabelError`` is raised
so the problem is surfaced immediately rather than swallowed silently.

Example usage
-------------
::

    from app.nlp import SentimentAnalyzer

    analyzer = SentimentAnalyzer()
    result = analyzer.analyze("Apple beats expectations on record iPhone sales")
    print(result.label, result.confidence)   # Sentiment.POSITIVE 0.97
"""

from __future__ import annotations

import logging
import re
import unicodedata
from typing import Any

from app.domain.market.entities import Sentiment, SentimentResult
from app.nlp.pipelines import load_pipeline
from app.nlp.unknownlabelserror import UnknownLabelError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal constants
# ---------------------------------------------------------------------------

_MODEL_NAME: str = "cardiffnlp/twitter-roberta-base-sentiment-latest"
_TASK: str = "sentiment-analysis"

_LABEL_MAP: dict[str, Sentiment] = {
    "positive": Sentiment.POSITIVE,
    "negative": Sentiment.NEGATIVE,
    "neutral": Sentiment.NEUTRAL,
    "1 star": Sentiment.NEGATIVE,
    "2 stars": Sentiment.NEGATIVE,
    "3 stars": Sentiment.NEUTRAL,
    "4 stars": Sentiment.POSITIVE,
    "5 stars": Sentiment.POSITIVE,
    "label_0": Sentiment.NEGATIVE,
    "label_1": Sentiment.NEUTRAL,
    "label_2": Sentiment.POSITIVE,
}

# Regex: emoji & miscellaneous symbol Unicode blocks
_EMOJI_RE: re.Pattern[str] = re.compile(
    "["
    "\U0001F600-\U0001F64F"  # emoticons
    "\U0001F300-\U0001F5FF"  # symbols & pictographs
    "\U0001F680-\U0001F6FF"  # transport & map
    "\U0001F1E0-\U0001F1FF"  # flags
    "\U00002702-\U000027B0"
    "\U0000FE00-\U0000FE0F"  # variation selectors
    "\U0000200D"             # zero-width joiner
    "]+",
    flags=re.UNICODE,
)


def preprocess(text: str) -> str:
    """Normalise and clean news text for NLP inference.

    Steps applied:
    1. Unicode NFC normalisation.
    2. Remove emojis and miscellaneous symbols.
    3. Collapse multiple whitespace characters into a single space.
    """
    text = unicodedata.normalize("NFC", text)
    text = _EMOJI_RE.sub("", text)
    return re.sub(r"\s+", " ", text).strip()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class SentimentAnalyzer:
    """Sentiment classifier for English financial news.

    The underlying pipeline is loaded on first use and shared
    process-wide through :func:`app.nlp.pipelines.load_pipeline`.

    Parameters
    ----------
    model_name : str, optional
        Override the default model identifier (useful for testing with a
        smaller/faster model).
    """

    def __init__(self, model_name: str = _MODEL_NAME) -> None:
        self._model_name = model_name

    @property
    def model_name(self) -> str:
        return self._model_name

    def warm_up(self) -> None:
        """Load the model now instead of on the first request."""
        load_pipeline(_TASK, self._model_name)

    def analyze(self, text: str) -> SentimentResult:
        """Classify the sentiment of a headline or article excerpt.

        Parameters
        ----------
        text : str
            Text to classify. Long inputs are truncated by the tokenizer.

        Returns
        -------
        SentimentResult
            Mapped label and model confidence.

        Raises
        ------
        ValueError
            If *text* is empty or blank.
        UnknownLabelError
            If the model returns a label not in the expected mapping.
        """
        if not text or not text.strip():
            raise ValueError("Input text must not be empty or blank.")

        classifier = load_pipeline(_TASK, self._model_name)
        result: dict[str, Any] = classifier(preprocess(text), truncation=True)[0]
        return self._map_result(result)

    def _map_result(self, result: dict[str, Any]) -> SentimentResult:
        """Map a single pipeline result dict to a SentimentResult.

        Raises
        ------
        UnknownLabelError
            If the label is not in ``_LABEL_MAP``.
        """
        raw_label: str = str(result["label"]).strip().lower()
        confidence = float(result["score"])

        label = _LABEL_MAP.get(raw_label)
        if label is None:
            raise UnknownLabelError(label=raw_label, confidence=confidence)

        logger.debug(
            "Sentiment: label=%s  mapped=%s  confidence=%.4f",
            raw_label,
            label.value,
            confidence,
        )
        return SentimentResult(label=label, confidence=confidence)
