"""
Repository implementations for reading the intent catalog.
"""

from support_assistant.infrastructure.repositories.intent_repository import (
    HttpIntentRepository,
    InMemoryIntentRepository,
    JsonFileIntentRepository,
    create_intent_store,
)

__all__ = [
    "HttpIntentRepository",
    "InMemoryIntentRepository",
    "JsonFileIntentRepository",
    "create_intent_store",
]
