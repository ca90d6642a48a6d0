"""Hardware collectors"""
from .base import BaseCollector
from .dummy import DummyCollector

__all__ = [
    'BaseCollector',
    'DummyCollector'
]
