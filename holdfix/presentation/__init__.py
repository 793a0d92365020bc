"""Presentation layer for holdfix."""
from .cli import main

__all__ = ['main']
