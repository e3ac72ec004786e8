"""
Abstract interfaces for the collaborators the domain services depend on.
"""

from support_assistant.domain.interfaces.repository_interface import IntentStoreInterface
from support_assistant.domain.interfaces.search_interface import IntentSearchInterface

__all__ = [
    "IntentStoreInterface",
    "IntentSearchInterface",
]
