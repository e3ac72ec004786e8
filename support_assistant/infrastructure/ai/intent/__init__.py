"""
Intent classification components.

- Character n-gram TF-IDF and logistic regression classifier
- Exact-match shortcut over known utterances
- Greeting override for low-confidence results
- Deterministic paraphrase expansion of confirmed utterances
"""

from support_assistant.infrastructure.ai.intent.intent_classifier import IntentClassifier
from support_assistant.infrastructure.ai.intent.variations import VariationExpander

__all__ = [
    "IntentClassifier",
    "VariationExpander",
]
