# procgen_lab/demos/world_map_demo.py

import pygame

from .. import color_maps
from ..camera import Camera
from ..world_map import BiomeMapper, WorldMapGenerator
from .base import BACKGROUND_COLOR, Scene

VIEW_MODES = ("biome", "height", "heat", "moisture")
DEFAULT_PAN_SPEED = 8


class WorldMapScene(Scene):
    """
    Biome preview. Generates a wrapping world map and shows it by biome,
    height, heat or moisture. The camera pans and zooms the rendered image;
    clicking regenerates the map at a finer zoom level around a point.
    """
    name = "worldmap"
    title = "World Map"

    def __init__(self, config, logger, size, seed=None):
        super().__init__(config, logger, size, seed)
        generator_config = dict(self.config.get('generator', {}))
        generator_config['seed'] = self.seed
        self.generator = WorldMapGenerator(generator_config, self.logger)
        self.mapper = BiomeMapper()
        self.view_index = 0
        self.pan_speed = self.config.get('pan_speed_pixels', DEFAULT_PAN_SPEED)

        self.biome_lut = color_maps.create_biome_color_lut()
        self.height_lut = color_maps.create_height_lut()
        self.heat_lut = color_maps.create_heat_lut()
        self.moisture_lut = color_maps.create_moisture_lut()

        camera_config = {'display': {'screen_width': self.width, 'screen_height': self.height},
                         'camera': self.config.get('camera', {})}
        self.camera = Camera(camera_config, self.generator.settings['width'], self.generator.settings['height'])
        self.camera.fit_world()
        self.world = None
        self.regenerate()

    @property
    def view_mode(self) -> str:
        return VIEW_MODES[self.view_index]

    def regenerate(self, seed: int = None):
        self.world = self.generator.generate(seed)
        self.seed = self.world.seed
        self.mapper.make_biomes(self.world)
        self.dirty = True

    # --- Input ---
    def on_key(self, key, mod):
        if key == pygame.K_v:
            self.view_index = (self.view_index + 1) % len(VIEW_MODES)
            self.logger.info(f"Event: View switched to '{self.view_mode}'")
            self.dirty = True
        elif key == pygame.K_g:
            self.regenerate(self.seed + 1)
        else:
            return False
        return True

    def on_wheel(self, direction):
        if direction == 0:
            return False
        self.camera.zoom_at(*pygame.mouse.get_pos(), direction)
        return True

    def on_click(self, pos, button):
        if button == 1:
            world_x, world_y = self.camera.screen_to_world(*pos)
            fx = world_x / self.camera.world_width
            fy = world_y / self.camera.world_height
            if not (0.0 <= fx <= 1.0 and 0.0 <= fy <= 1.0):
                return False
            changed = self.generator.zoom_in(fx, fy)
        else:
            changed = self.generator.zoom_out()
        if changed:
            self.regenerate()
            self.camera.fit_world()
        return changed

    def pan(self, keys):
        """Pans the camera from the pressed-key state (WASD)."""
        if keys[pygame.K_w]:
            self.camera.pan(0, -self.pan_speed)
        if keys[pygame.K_s]:
            self.camera.pan(0, self.pan_speed)
        if keys[pygame.K_a]:
            self.camera.pan(-self.pan_speed, 0)
        if keys[pygame.K_d]:
            self.camera.pan(self.pan_speed, 0)

    def update(self, dt):
        if pygame.display.get_init():
            self.pan(pygame.key.get_pressed())

    def on_resize(self, width, height):
        super().on_resize(width, height)
        self.camera.resize(width, height)
        self.camera.fit_world()

    # --- Rendering ---
    def render(self):
        world = self.world
        if self.view_mode == "biome":
            return color_maps.get_biome_color_array(self.mapper.biome_codes, self.biome_lut)
        if self.view_mode == "height":
            return color_maps.get_height_color_array(world.elevation, self.height_lut)
        if self.view_mode == "heat":
            return color_maps.apply_lut(world.heat, self.heat_lut, 0.0, 1.0)
        return color_maps.apply_lut(world.moisture, self.moisture_lut, 0.0, 1.0)

    def draw(self, surface):
        if self.dirty or self._cached_surface is None:
            self._cached_surface = pygame.surfarray.make_surface(self.render())
            self.dirty = False

        surface.fill(BACKGROUND_COLOR)
        zoom = self.camera.zoom
        scaled_w = max(1, int(self.camera.world_width * zoom))
        scaled_h = max(1, int(self.camera.world_height * zoom))
        scaled = pygame.transform.scale(self._cached_surface, (scaled_w, scaled_h))
        self._view_rect = pygame.Rect(self.camera.world_to_screen(0, 0), (scaled_w, scaled_h))
        surface.blit(scaled, self._view_rect.topleft)

    def cell_under(self, pos):
        """(x, y) map cell under a screen position, or None off the map."""
        return self.screen_to_cell(pos, (self.world.width, self.world.height))

    def status_lines(self):
        lines = [
            f"Seed: {self.seed}, zoom level {self.generator.zoom}",
            f"View: {self.view_mode}",
            f"Land: {self.world.land_fraction:.0%}",
        ]
        if pygame.display.get_init() and pygame.mouse.get_focused():
            cell = self.cell_under(pygame.mouse.get_pos())
            if cell is not None:
                x, y = cell
                code = int(self.mapper.biome_codes[y, x])
                lines.append(f"Under cursor: {BiomeMapper.biome_name(code)} "
                             f"(h {self.world.elevation[y, x]:.2f}, heat {self.world.heat[y, x]:.2f}, "
                             f"moist {self.world.moisture[y, x]:.2f})")
        return lines

    def help_lines(self):
        return ["V: cycle view", "G: new seed", "WASD: pan", "Wheel: zoom",
                "Left click: zoom in at point", "Right click: zoom out"]
