"""
PNG snapshots of a routing scene.

Draws every obstacle as an outlined box and every route as a polyline with
an arrowhead at its end. Meant for eyeballing spacing problems, not for
production diagrams.
"""

import math
from typing import Dict, Hashable, List, Tuple

from PIL import Image, ImageDraw, ImageFont

from .geometry import Point, Rectangle


class RoutePNGRenderer:
    """Renders obstacles and routes as a PNG image."""

    def __init__(
        self,
        scale: int = 2,
        margin: int = 20,
        show_labels: bool = True,
        show_bends: bool = False,
    ):
        self.scale = scale
        self.margin = margin
        self.show_labels = show_labels
        self.show_bends = show_bends

        # Colors
        self.bg_color = (255, 255, 255)
        self.box_fill = (235, 235, 235)
        self.box_outline = (0, 0, 0)
        self.line_color = (30, 60, 200)
        self.bend_color = (200, 30, 30)
        self.text_color = (0, 0, 0)

        self.font = ImageFont.load_default()

    def render(self, router, output_path: str = "routes.png") -> str:
        """
        Render a ShortestPathRouter or ConnectionRouter.

        Args:
            router: The router whose last solve should be drawn
            output_path: Path to save the PNG file

        Returns:
            Path to the saved PNG file
        """
        obstacles, routes = self._collect(router)
        return self.render_scene(obstacles, routes, output_path)

    def render_scene(
        self,
        obstacles: List[Rectangle],
        routes: Dict[Hashable, List[Point]],
        output_path: str = "routes.png",
    ) -> str:
        xs: List[int] = []
        ys: List[int] = []
        for rect in obstacles:
            xs.extend((rect.x, rect.right))
            ys.extend((rect.y, rect.bottom))
        for points in routes.values():
            xs.extend(p.x for p in points)
            ys.extend(p.y for p in points)

        if not xs:
            # Nothing to draw, create a small placeholder image
            img = Image.new("RGB", (200, 100), self.bg_color)
            img.save(output_path)
            return output_path

        origin_x = min(xs) - self.margin
        origin_y = min(ys) - self.margin
        width = (max(xs) - origin_x + self.margin) * self.scale
        height = (max(ys) - origin_y + self.margin) * self.scale

        img = Image.new("RGB", (max(1, width), max(1, height)), self.bg_color)
        draw = ImageDraw.Draw(img)

        def to_canvas(x, y) -> Tuple[int, int]:
            return ((x - origin_x) * self.scale, (y - origin_y) * self.scale)

        line_width = max(1, self.scale)
        for rect in obstacles:
            x1, y1 = to_canvas(rect.x, rect.y)
            x2, y2 = to_canvas(rect.right - 1, rect.bottom - 1)
            draw.rectangle(
                [x1, y1, x2, y2],
                fill=self.box_fill,
                outline=self.box_outline,
                width=line_width,
            )

        for key, points in routes.items():
            canvas_points = [to_canvas(p.x, p.y) for p in points]
            self._draw_route(draw, canvas_points, line_width)
            if self.show_labels and canvas_points:
                draw.text(
                    canvas_points[0], str(key), fill=self.text_color, font=self.font
                )

        img.save(output_path, "PNG")
        return output_path

    @staticmethod
    def _collect(router):
        # ConnectionRouter wraps the engine as ``algorithm``
        if hasattr(router, "algorithm"):
            engine = router.algorithm
            routes = {
                key: router.get_points(key) for key in router.connection_keys()
            }
        else:
            engine = router
            routes = {h: engine.get_points(h) for h in engine.handles()}
        return engine.get_obstacles(), {k: v for k, v in routes.items() if v}

    def _draw_route(self, draw: ImageDraw.Draw, points, line_width: int):
        if len(points) < 2:
            return
        for p1, p2 in zip(points, points[1:]):
            draw.line([p1, p2], fill=self.line_color, width=line_width)

        if self.show_bends:
            r = 2 * self.scale
            for x, y in points[1:-1]:
                draw.ellipse([x - r, y - r, x + r, y + r], outline=self.bend_color)

        self._draw_arrowhead(draw, points[-2], points[-1])

    def _draw_arrowhead(
        self,
        draw: ImageDraw.Draw,
        from_point: Tuple[int, int],
        to_point: Tuple[int, int],
    ):
        """Draw an arrowhead at the end of a line."""
        x1, y1 = from_point
        x2, y2 = to_point
        if (x1, y1) == (x2, y2):
            return

        arrow_size = 6 * self.scale
        angle = math.atan2(y2 - y1, x2 - x1)
        angle1 = angle + math.pi * 0.8
        angle2 = angle - math.pi * 0.8

        ax1 = x2 + arrow_size * math.cos(angle1)
        ay1 = y2 + arrow_size * math.sin(angle1)
        ax2 = x2 + arrow_size * math.cos(angle2)
        ay2 = y2 + arrow_size * math.sin(angle2)

        draw.polygon([(x2, y2), (ax1, ay1), (ax2, ay2)], fill=self.line_color)


def render_to_png(router, output_path: str = "routes.png", **kwargs) -> str:
    """
    Convenience function to render a router's routes to PNG.

    Args:
        router: ShortestPathRouter or ConnectionRouter
        output_path: Path to save the PNG file
        **kwargs: Additional parameters for RoutePNGRenderer

    Returns:
        Path to the saved PNG file
    """
    renderer = RoutePNGRenderer(**kwargs)
    return renderer.render(router, output_path)
