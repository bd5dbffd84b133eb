"""
Lightweight language identification for news headlines.

Headlines are short, so anything under ``MIN_DETECTABLE_CHARS`` is
reported as undetermined rather than guessed.
"""

import logging
from typing import Optional

from langdetect import DetectorFactory, LangDetectException, detect

logger = logging.getLogger(__name__)

# langdetect is randomised; pin it so the same title always gets the same answer.
DetectorFactory.seed = 0

MIN_DETECTABLE_CHARS = 10
ENGLISH = "en"


def detect_language(text: str) -> Optional[str]:
    """Return an ISO 639-1 code for ``text``, or None if undetermined."""
    if not text or len(text.strip()) < MIN_DETECTABLE_CHARS:
        return None
    try:
        return detect(text)
    except LangDetectException:
        logger.debug("Language undetermined for: %s", text)
        return None


def is_english_or_undetermined(text: str) -> bool:
    """Keep English text and text too short or odd to classify."""
    language = detect_language(text)
    return language is None or language == ENGLISH
