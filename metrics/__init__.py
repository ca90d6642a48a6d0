"""Metric models, accumulation cache and collector registry"""
