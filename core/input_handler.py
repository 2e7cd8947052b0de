"""Input handling: camera orbit, pointer interaction and simulation controls."""

import logging
import pygame
from pygame.locals import *

from config import swarm as config
from swarm import SwarmSystem
from .camera import Camera


logger = logging.getLogger(__name__)

MIN_RINGS = 1
MAX_RINGS = 12


class InputHandler:
    """
    Translates pygame events into camera moves, pointer updates and swarm commands.

    Pointer hover: pushes (or pulls) particles
    Right drag: orbit camera
    Wheel: zoom
    M: start morph    R: rebuild rings    Up/Down: ring count
    T: toggle repel/attract    H: toggle HUD    P: toggle pointer marker
    F5: save ring settings    L: retry a failed target load
    W/A/S/D: orbit camera    Q/E: zoom    C: reset camera
    """

    def __init__(self, camera: Camera, system: SwarmSystem, screen_size: tuple = None, rings_path: str = None):
        self.camera = camera
        self.system = system
        self.screen_size = screen_size or (config.WINDOW["width"], config.WINDOW["height"])
        self.rings_path = rings_path or config.SWARM["rings_file"]
        self.rotating = False
        self.last_mouse_pos = (0, 0)
        self.show_hud = True
        self.show_pointer = False

    def _update_pointer(self, mouse_pos):
        width, height = self.screen_size
        ndc_x = (mouse_pos[0] / width) * 2 - 1
        ndc_y = -(mouse_pos[1] / height) * 2 + 1
        hit = self.camera.pointer_to_plane(ndc_x, ndc_y, width / height)
        if hit is not None:
            self.system.pointer.move(hit[0], hit[1], self.system.clock())

    def _change_ring_count(self, delta: int):
        count = max(MIN_RINGS, min(MAX_RINGS, self.system.ring_count + delta))
        if count != self.system.ring_count:
            self.system.set_ring_count(count)

    def _save_rings(self):
        try:
            self.system.save_specs(self.rings_path)
        except OSError as e:
            logger.error(f"Could not save ring settings: {e}")

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Handle a single pygame event.
        Returns False if the application should quit, True otherwise.
        """
        if event.type == QUIT:
            return False
        elif event.type == KEYDOWN:
            if event.key == K_ESCAPE:
                return False
            elif event.key == K_m:
                self.system.request_morph()
            elif event.key == K_r:
                self.system.rebuild(self.system.specs)
            elif event.key == K_UP:
                self._change_ring_count(1)
            elif event.key == K_DOWN:
                self._change_ring_count(-1)
            elif event.key == K_t:
                physics = self.system.physics
                physics.repel = not physics.repel
                logger.info(f"Pointer mode: {'repel' if physics.repel else 'attract'}")
            elif event.key == K_h:
                self.show_hud = not self.show_hud
            elif event.key == K_p:
                self.show_pointer = not self.show_pointer
            elif event.key == K_c:
                self.camera.reset()
            elif event.key == K_F5:
                self._save_rings()
            elif event.key == K_l:
                if not self.system.retry_target_load():
                    logger.info("No failed target load to retry")
        elif event.type == MOUSEBUTTONDOWN:
            if event.button == 3:
                self.rotating = True
                self.last_mouse_pos = event.pos
        elif event.type == MOUSEBUTTONUP:
            if event.button == 3:
                self.rotating = False
        elif event.type == MOUSEMOTION:
            if self.rotating:
                dx = event.pos[0] - self.last_mouse_pos[0]
                dy = event.pos[1] - self.last_mouse_pos[1]
                self.camera.rotate(
                    dx * config.CAMERA["mouse_sensitivity"],
                    -dy * config.CAMERA["mouse_sensitivity"]
                )
                self.last_mouse_pos = event.pos
            else:
                self._update_pointer(event.pos)
        elif event.type == MOUSEWHEEL:
            self.camera.zoom_smooth(-event.y * config.CAMERA["keyboard_zoom_speed"] * 0.5)
        elif event.type == WINDOWLEAVE:
            self.system.pointer.leave()
        elif event.type == WINDOWENTER:
            self.system.pointer.enter()

        return True

    def handle_continuous_input(self, dt: float):
        """Keyboard camera orbit (called each frame)."""
        keys = pygame.key.get_pressed()
        rot_speed = config.CAMERA["keyboard_rotate_speed"] * dt

        if keys[K_a]:
            self.camera.rotate(-rot_speed, 0)
        if keys[K_d]:
            self.camera.rotate(rot_speed, 0)
        if keys[K_w]:
            self.camera.rotate(0, rot_speed)
        if keys[K_s]:
            self.camera.rotate(0, -rot_speed)

        zoom_speed = config.CAMERA["keyboard_zoom_speed"] * dt
        if keys[K_q]:
            self.camera.zoom_smooth(-zoom_speed)
        if keys[K_e]:
            self.camera.zoom_smooth(zoom_speed)
