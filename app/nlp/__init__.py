"""
NLP module for news classification.

Exports the sentiment and zero-shot topic classifiers, the headline
language filter, and the custom error types.
"""

from app.nlp.language import is_english_or_undetermined
from app.nlp.sentiment import SentimentAnalyzer
from app.nlp.unknownlabelserror import UnknownLabelError
from app.nlp.zero_shot import TopicClassifier

__all__ = [
    "SentimentAnalyzer",
    "TopicClassifier",
    "UnknownLabelError",
    "is_english_or_undetermined",
]
