"""Window, frame loop and the glue between simulation, input and drawing."""

import logging
import numpy as np
import pygame
from pygame.locals import *
from OpenGL.GL import *
from OpenGL.GLU import *

from config import swarm as config
from .camera import Camera
from .input_handler import InputHandler
from rendering import SwarmRenderer, TextRenderer
from swarm import SwarmSystem
from swarm.physics import warmup_kernels
from mesh import TargetPointLoader


logger = logging.getLogger(__name__)

HELP_LINE = "M morph  R rebuild  Up/Down rings  T pointer mode  F5 save rings  H hud  C camera"


class Application:
    """
    Owns the pygame/OpenGL window and runs one simulation tick per frame.
    A morph-target loader, if given, is attached to the system and started here.
    """

    def __init__(self, system: SwarmSystem, loader: TargetPointLoader = None, rings_path: str = None):
        pygame.init()
        self.size = (config.WINDOW["width"], config.WINDOW["height"])
        self._open_window()
        pygame.display.set_caption(config.WINDOW["title"])

        self.system = system
        if loader is not None:
            self.system.attach_loader(loader)
            loader.start()

        logger.info("Compiling kernels...")
        warmup_kernels()

        self.camera = Camera()
        self.input_handler = InputHandler(self.camera, self.system, self.size, rings_path)
        self.renderer = SwarmRenderer()
        self.text_renderer = TextRenderer()

        self.clock = pygame.time.Clock()
        self.running = True
        self.fps = 0.0
        logger.info(f"Window {self.size[0]}x{self.size[1]} ready")

    def _open_window(self):
        pygame.display.set_mode(self.size, DOUBLEBUF | OPENGL | RESIZABLE)
        glClearColor(*config.COLORS["background"])
        glEnable(GL_DEPTH_TEST)
        self._set_projection()

    def _set_projection(self):
        width, height = self.size
        glViewport(0, 0, width, height)
        glMatrixMode(GL_PROJECTION)
        glLoadIdentity()
        gluPerspective(config.CAMERA["fov"], width / max(height, 1),
                       config.CAMERA["near_clip"], config.CAMERA["far_clip"])
        glMatrixMode(GL_MODELVIEW)

    def _handle_events(self):
        for event in pygame.event.get():
            if event.type == VIDEORESIZE:
                self.size = (max(event.w, 1), max(event.h, 1))
                self._set_projection()
                self.input_handler.screen_size = self.size
            elif not self.input_handler.handle_event(event):
                self.running = False

    def _update(self, dt: float):
        self.input_handler.handle_continuous_input(dt)
        self.camera.update(dt)
        self.system.tick()

        every = config.LOGGING["throttle_frames"]
        if every and self.system.frame % every == 0:
            self._log_state()

    def _log_state(self):
        stats = self.system.stats()
        logger.info(
            f"Frame {stats['frame']} | {stats['rings']} rings, {stats['particles']} particles | "
            f"{stats['state']} {stats['progress']:.0%} | FPS {self.fps:.0f}"
        )
        if logger.isEnabledFor(logging.DEBUG):
            radii = [ring.radii().mean() for ring in self.system.rings if ring.count]
            if radii:
                logger.debug(f"Mean ring radius {np.mean(radii):.4f}")

    def _hud_lines(self):
        stats = self.system.stats()
        if stats["state"] == "morphing":
            state = f"morphing {stats['progress']:.0%}"
        elif stats["state"] == "frozen":
            state = "frozen (R to rebuild)"
        elif self.system.morph_available:
            state = "orbit (target ready)"
        elif self.system.loader is None:
            state = "orbit (no target)"
        elif self.system.loader.failed:
            state = "orbit (target failed, L to retry)"
        else:
            state = "orbit (loading target...)"
        mode = "repel" if self.system.physics.repel else "attract"
        return [
            f"Rings {stats['rings']} | Particles {stats['particles']} | FPS {self.fps:.0f}",
            f"{state} | pointer {mode}",
            HELP_LINE,
        ]

    def _render(self):
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)
        self.camera.apply()
        self.renderer.draw(self.system.render_buffers())

        pointer = self.system.pointer
        if self.input_handler.show_pointer and pointer.active:
            self.renderer.draw_marker(pointer.x, pointer.y)
        if self.input_handler.show_hud:
            self.text_renderer.draw_lines(self._hud_lines(), 10, 10, self.size)

        pygame.display.flip()

    def run(self):
        """Loop until the window closes or ESC is pressed."""
        try:
            while self.running:
                dt = self.clock.tick(config.WINDOW["fps"]) / 1000.0
                self.fps = self.clock.get_fps()
                self._handle_events()
                self._update(dt)
                self._render()
        finally:
            pygame.quit()
            logger.info("Application closed")
