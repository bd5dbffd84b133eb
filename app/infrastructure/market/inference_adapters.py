"""
Adapters: Transformer-based text classification.

Implement CategoryClassifierPort and SentimentClassifierPort by running
the NLP services off the event loop. Every failure, including blank
input and unknown labels, surfaces as InferenceError.
"""

import asyncio
from typing import Optional

from app.domain.market.entities import CategoryResult, SentimentResult
from app.domain.market.errors import InferenceError
from app.domain.market.ports import CategoryClassifierPort, SentimentClassifierPort
from app.nlp.sentiment import SentimentAnalyzer
from app.nlp.zero_shot import TopicClassifier


class TransformersSentimentAdapter(SentimentClassifierPort):
    """Sentiment classification through the shared HuggingFace pipeline."""

    def __init__(
        self,
        analyzer: Optional[SentimentAnalyzer] = None,
        model_name: Optional[str] = None,
    ) -> None:
        self._analyzer = analyzer
        self._model_name = model_name

    def _get_analyzer(self) -> SentimentAnalyzer:
        if self._analyzer is None:
            self._analyzer = (
                SentimentAnalyzer(model_name=self._model_name)
                if self._model_name
                else SentimentAnalyzer()
            )
        return self._analyzer

    def warm_up(self) -> None:
        self._get_analyzer().warm_up()

    async def classify(self, text: str) -> SentimentResult:
        analyzer = self._get_analyzer()
        try:
            return await asyncio.to_thread(analyzer.analyze, text)
        except InferenceError:
            raise
        except Exception as exc:
            raise InferenceError("sentiment-analysis", str(exc)) from exc


class TransformersCategoryAdapter(CategoryClassifierPort):
    """Zero-shot topic classification through the shared HuggingFace pipeline."""

    def __init__(
        self,
        classifier: Optional[TopicClassifier] = None,
        model_name: Optional[str] = None,
    ) -> None:
        self._classifier = classifier
        self._model_name = model_name

    def _get_classifier(self) -> TopicClassifier:
        if self._classifier is None:
            self._classifier = (
                TopicClassifier(model_name=self._model_name)
                if self._model_name
                else TopicClassifier()
            )
        return self._classifier

    def warm_up(self) -> None:
        self._get_classifier().warm_up()

    async def classify(self, text: str, labels: list[str]) -> CategoryResult:
        classifier = self._get_classifier()
        try:
            return await asyncio.to_thread(classifier.classify, text, labels)
        except Exception as exc:
            raise InferenceError("zero-shot-classification", str(exc)) from exc
