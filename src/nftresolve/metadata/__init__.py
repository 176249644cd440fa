"""Metadata document normalization."""

from .normalizer import MetadataNormalizer

__all__ = ["MetadataNormalizer"]
