"""Extensions directory management for EmmetLS."""
from .extensions import EMPTY_SNAPSHOT, ExtensionsSnapshot, ExtensionsStore

__all__ = ['EMPTY_SNAPSHOT', 'ExtensionsSnapshot', 'ExtensionsStore']
