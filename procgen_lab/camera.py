# procgen_lab/camera.py

class Camera:
    """
    Pan/zoom view onto a world measured in arbitrary units (pixels of a
    cached surface, cells of a grid). `x, y` is the world point shown at the
    centre of the screen; `zoom` is screen pixels per world unit.

    Reads the 'display' and optional 'camera' blocks of a config dict.
    """
    def __init__(self, config: dict, world_width: float, world_height: float):
        self.world_width = world_width
        self.world_height = world_height
        self.screen_width = config['display']['screen_width']
        self.screen_height = config['display']['screen_height']

        camera = config.get('camera', {})
        self.zoom_speed = camera.get('zoom_speed', 0.1)
        self.max_zoom = camera.get('max_zoom', 8.0)
        self.min_zoom = camera.get('min_zoom', 0.25)

        self.x = world_width / 2
        self.y = world_height / 2
        self.zoom = 1.0
        # Set whenever the scale changes so callers can rebuild scaled surfaces.
        self.zoom_changed = True

    def resize(self, screen_width: int, screen_height: int):
        self.screen_width = screen_width
        self.screen_height = screen_height
        self.zoom_changed = True

    def fit_world(self):
        """Centres the world and picks the largest zoom that shows all of it."""
        fit = min(self.screen_width / self.world_width, self.screen_height / self.world_height)
        self.min_zoom = min(self.min_zoom, fit)
        self.max_zoom = max(self.max_zoom, fit)
        self.x = self.world_width / 2
        self.y = self.world_height / 2
        self._set_zoom(fit)

    # --- Coordinate Transforms ---
    def world_to_screen(self, world_x, world_y):
        return (int((world_x - self.x) * self.zoom + self.screen_width / 2),
                int((world_y - self.y) * self.zoom + self.screen_height / 2))

    def screen_to_world(self, screen_x, screen_y):
        return ((screen_x - self.screen_width / 2) / self.zoom + self.x,
                (screen_y - self.screen_height / 2) / self.zoom + self.y)

    # --- Movement ---
    def pan(self, dx, dy):
        """Moves the view by a screen-pixel offset, keeping its centre over the world."""
        self.x = min(max(self.x + dx / self.zoom, 0.0), self.world_width)
        self.y = min(max(self.y + dy / self.zoom, 0.0), self.world_height)

    def _set_zoom(self, zoom: float):
        zoom = min(self.max_zoom, max(self.min_zoom, zoom))
        if zoom != self.zoom:
            self.zoom = zoom
            self.zoom_changed = True

    def zoom_in(self):
        self._set_zoom(self.zoom * (1 + self.zoom_speed))

    def zoom_out(self):
        self._set_zoom(self.zoom * (1 - self.zoom_speed))

    def zoom_at(self, screen_x, screen_y, direction: int):
        """Zooms in (direction > 0) or out, keeping the world point under the cursor fixed."""
        anchor_x, anchor_y = self.screen_to_world(screen_x, screen_y)
        if direction > 0:
            self.zoom_in()
        elif direction < 0:
            self.zoom_out()
        after_x, after_y = self.screen_to_world(screen_x, screen_y)
        self.pan((anchor_x - after_x) * self.zoom, (anchor_y - after_y) * self.zoom)
