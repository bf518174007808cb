"""Inline code suggestions backed by a local text-generation service."""

__version__ = "0.1.0"
