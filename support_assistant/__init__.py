"""
Support chat assistant.

Resolves free-form support questions to canned answers with a statistical
intent classifier, falls back to fuzzy search over the intent catalog when
the classifier is unsure, and learns from the user's disambiguation choices
while the service is running.
"""

__version__ = "0.1.0"
