# backend/modules/feedback/services/topic_service.py

import logging
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

import spacy
from spacy.language import Language

from core.config import settings

logger = logging.getLogger(__name__)

NOUN_TAGS = ("NOUN", "PROPN")
ADJECTIVE_TAGS = ("ADJ",)


class TopicExtractor:
    """Surfaces recurring talking points across a set of comments"""

    def __init__(
        self,
        model_name: Optional[str] = None,
        limit: Optional[int] = None,
        min_length: Optional[int] = None,
        nlp: Optional[Language] = None,
    ):
        self.model_name = model_name or settings.topic_spacy_model
        self.limit = limit if limit is not None else settings.topic_limit
        self.min_length = (
            min_length if min_length is not None else settings.topic_min_length
        )
        self._nlp = nlp

    @property
    def nlp(self) -> Language:
        if self._nlp is None:
            logger.info(f"Loading spaCy pipeline {self.model_name}")
            self._nlp = spacy.load(self.model_name, disable=["ner", "parser"])
        return self._nlp

    def extract_topics(self, comments: Sequence[str]) -> List[Dict[str, Any]]:
        """
        Return the most frequent nouns and adjectives across ``comments``.

        Nouns are tallied before adjectives; ties keep the order in which
        words first appeared in that combined list.
        """

        if not comments:
            return []

        doc = self.nlp(" ".join(comments))

        nouns = [token.text for token in doc if token.pos_ in NOUN_TAGS]
        adjectives = [token.text for token in doc if token.pos_ in ADJECTIVE_TAGS]

        counts: Counter = Counter()
        for word in nouns + adjectives:
            clean_word = word.lower().strip()
            if len(clean_word) >= self.min_length:
                counts[clean_word] += 1

        # Counter preserves insertion order and sorted() is stable
        ranked = sorted(counts.items(), key=lambda entry: entry[1], reverse=True)

        return [
            {"topic": topic, "count": count} for topic, count in ranked[: self.limit]
        ]
