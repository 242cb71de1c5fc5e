"""Classifiers turning source text into highlight event streams."""

from __future__ import annotations

from .base import Classifier, ClassifierFactory
from .pygments import PygmentsClassifier, load_grammar_lexers, pygments_classifier_factory
from .queries import (
    DEFAULT_HIGHLIGHTS,
    HIGHLIGHT_NAMES,
    QueryTable,
    load_query_table,
    resolve_highlight_name,
)


__all__ = [
    "DEFAULT_HIGHLIGHTS",
    "HIGHLIGHT_NAMES",
    "Classifier",
    "ClassifierFactory",
    "PygmentsClassifier",
    "QueryTable",
    "load_grammar_lexers",
    "load_query_table",
    "pygments_classifier_factory",
    "resolve_highlight_name",
]
