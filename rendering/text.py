"""HUD text drawn as pygame-rendered pixel blocks over the GL scene."""

import pygame
from OpenGL.GL import *

from config import swarm as config


class TextRenderer:
    """Renders screen-space text lines; rendered strings are cached between frames."""

    def __init__(self, font_name: str = "monospace", font_size: int = 16, color=None):
        pygame.font.init()
        self.font = pygame.font.SysFont(font_name, font_size)
        self.color = config.COLORS["text"] if color is None else color
        self.line_height = self.font.get_linesize()
        self._cache = {}

    def _pixels(self, text: str):
        cached = self._cache.get(text)
        if cached is None:
            surface = self.font.render(text, True, self.color)
            cached = (pygame.image.tostring(surface, "RGBA", True), surface.get_size())
            if len(self._cache) > 64:
                self._cache.clear()
            self._cache[text] = cached
        return cached

    def _begin_overlay(self, screen_size: tuple):
        glMatrixMode(GL_PROJECTION)
        glPushMatrix()
        glLoadIdentity()
        glOrtho(0, screen_size[0], 0, screen_size[1], -1, 1)
        glMatrixMode(GL_MODELVIEW)
        glPushMatrix()
        glLoadIdentity()
        glDisable(GL_DEPTH_TEST)
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)

    def _end_overlay(self):
        glDisable(GL_BLEND)
        glEnable(GL_DEPTH_TEST)
        glPopMatrix()
        glMatrixMode(GL_PROJECTION)
        glPopMatrix()
        glMatrixMode(GL_MODELVIEW)

    def draw_lines(self, lines, x: int, y: int, screen_size: tuple):
        """
        Draw lines stacked downward.

        Args:
            lines: Strings to draw, top to bottom
            x: X position from the left edge
            y: Y position of the first line from the top edge
            screen_size: (width, height) of the window
        """
        self._begin_overlay(screen_size)
        for i, line in enumerate(lines):
            data, (w, h) = self._pixels(line)
            glRasterPos2f(x, screen_size[1] - (y + i * self.line_height) - h)
            glDrawPixels(w, h, GL_RGBA, GL_UNSIGNED_BYTE, data)
        self._end_overlay()
