"""
Narrative text for generated terrains.
"""

from .lore_provider import LoreProvider, NO_KEY_MESSAGE, FAILURE_MESSAGE, EMPTY_MESSAGE

__all__ = ["LoreProvider", "NO_KEY_MESSAGE", "FAILURE_MESSAGE", "EMPTY_MESSAGE"]
