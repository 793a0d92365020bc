"""Routing infrastructure."""
from .maze_router import MazeRouter

__all__ = ['MazeRouter']
