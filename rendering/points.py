"""Point-sprite rendering of ring buffers through VBOs."""

import logging
import numpy as np
from OpenGL.GL import *
from OpenGL.arrays import vbo

from config import swarm as config


logger = logging.getLogger(__name__)


class SwarmRenderer:
    """
    Draws every ring as GL_POINTS. Reads the simulation buffers once per
    frame and never writes to them.
    """

    def __init__(self, point_size: float = None, alpha: float = None):
        self.point_size = config.SWARM["point_size"] if point_size is None else point_size
        self.alpha = config.SWARM["point_alpha"] if alpha is None else alpha
        self._vbo_positions = None
        self._vbo_colors = None
        self._vbos_initialized = False
        self._vbos_failed = False

    def _init_vbos(self, positions: np.ndarray, colors: np.ndarray):
        """Initialize VBOs for rendering."""
        if self._vbos_initialized or self._vbos_failed:
            return

        try:
            self._vbo_positions = vbo.VBO(positions, usage=GL_DYNAMIC_DRAW)
            self._vbo_colors = vbo.VBO(colors, usage=GL_DYNAMIC_DRAW)
            self._vbos_initialized = True
        except Exception as e:
            logger.warning(f"VBO init failed, using client arrays: {e}")
            self._vbos_failed = True

    def _pack(self, buffers):
        """Concatenate ring buffers into float32 position and RGBA color arrays."""
        positions = [p for p, _ in buffers if len(p)]
        if not positions:
            return None, None
        pos = np.concatenate(positions).astype(np.float32)
        rgb = np.concatenate([c for p, c in buffers if len(p)])
        rgba = np.empty((len(rgb), 4), dtype=np.float32)
        rgba[:, :3] = rgb
        rgba[:, 3] = self.alpha
        return pos, rgba

    def draw(self, buffers):
        """Render (positions, colors) pairs as one point batch."""
        positions, colors = self._pack(buffers)
        if positions is None:
            return

        if not self._vbos_initialized:
            self._init_vbos(positions, colors)

        glEnable(GL_POINT_SMOOTH)
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
        glDepthMask(GL_FALSE)
        glPointSize(self.point_size)

        if self._vbos_initialized:
            self._vbo_positions.set_array(positions)
            self._vbo_colors.set_array(colors)

            self._vbo_positions.bind()
            glEnableClientState(GL_VERTEX_ARRAY)
            glVertexPointer(3, GL_FLOAT, 0, None)

            self._vbo_colors.bind()
            glEnableClientState(GL_COLOR_ARRAY)
            glColorPointer(4, GL_FLOAT, 0, None)

            glDrawArrays(GL_POINTS, 0, len(positions))

            self._vbo_positions.unbind()
            self._vbo_colors.unbind()
            glDisableClientState(GL_VERTEX_ARRAY)
            glDisableClientState(GL_COLOR_ARRAY)
        else:
            glEnableClientState(GL_VERTEX_ARRAY)
            glEnableClientState(GL_COLOR_ARRAY)
            glVertexPointer(3, GL_FLOAT, 0, positions)
            glColorPointer(4, GL_FLOAT, 0, colors)
            glDrawArrays(GL_POINTS, 0, len(positions))
            glDisableClientState(GL_VERTEX_ARRAY)
            glDisableClientState(GL_COLOR_ARRAY)

        glDepthMask(GL_TRUE)
        glDisable(GL_BLEND)
        glDisable(GL_POINT_SMOOTH)

    def draw_marker(self, x: float, y: float, size: float = 12.0):
        """Debug marker at the pointer's plane position."""
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
        glPointSize(size)
        glColor4f(*config.COLORS["pointer"])
        glBegin(GL_POINTS)
        glVertex3f(x, y, 0.0)
        glEnd()
        glDisable(GL_BLEND)
