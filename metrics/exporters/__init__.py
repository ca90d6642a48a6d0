"""Monitoring backends"""
from .base import BaseExporter, ExporterFactory

__all__ = [
    'BaseExporter',
    'ExporterFactory'
]
