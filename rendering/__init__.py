"""Rendering components for the ring swarm."""

from .points import SwarmRenderer
from .text import TextRenderer

__all__ = ["SwarmRenderer", "TextRenderer"]
