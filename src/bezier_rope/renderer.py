# renderer.py
from pathlib import Path

import moderngl
import numpy as np
import pygame

from bezier_rope.config import TANGENT_LENGTH
from bezier_rope.models import ControlRole, RenderFrame
from bezier_rope.types import POLYLINE, VERTS

# ------------------------
# Styling
# ------------------------

CURVE_COLOR = (0.19, 0.69, 0.78, 1.0)  # teal
CURVE_WIDTH = 3.0
TANGENT_COLOR = (1.0, 1.0, 1.0, 0.6)
POLYGON_COLOR = (1.0, 1.0, 1.0, 0.08)
TARGET_COLOR = (0.6, 0.6, 0.6, 0.5)
POINT_RADIUS = 8.0

POINT_STYLE = {
    ControlRole.ANCHOR_START: ((1.0, 1.0, 1.0, 1.0), 0.0),
    ControlRole.ANCHOR_END: ((1.0, 1.0, 1.0, 1.0), 0.0),
    ControlRole.HANDLE1: ((1.0, 0.8, 0.0, 0.95), 1.0),  # yellow
    ControlRole.HANDLE2: ((1.0, 0.58, 0.0, 0.95), 1.0),  # orange
}

RENDER_MODES = ["Curve", "Curve+Tangents", "Full"]
DEFAULT_RENDER_MODE = RENDER_MODES.index("Full")

# ------------------------
# Geometry helpers
# ------------------------


def mode_layers(mode: str) -> tuple[bool, bool, bool]:
    """(tangents, control polygon, targets) drawn on top of the curve and points."""
    if mode not in RENDER_MODES:
        raise ValueError(f"unknown render mode {mode!r}")
    full = mode == "Full"
    return mode != "Curve", full, full


def ribbon(polyline: POLYLINE, width: float) -> VERTS:
    """Triangle-strip vertices for a thick line through the polyline."""
    if len(polyline) < 2:
        return np.zeros((0, 2), dtype=np.float32)

    direction = np.gradient(polyline, axis=0)
    length = np.linalg.norm(direction, axis=1, keepdims=True)
    direction = np.divide(direction, length, out=np.zeros_like(direction), where=length > 0)
    normal = np.stack([-direction[:, 1], direction[:, 0]], axis=1) * (width * 0.5)

    strip = np.empty((len(polyline) * 2, 2), dtype=np.float32)
    strip[0::2] = polyline + normal
    strip[1::2] = polyline - normal
    return strip


def tangent_segments(origins: POLYLINE, directions: POLYLINE, length: float) -> VERTS:
    """Pairs of endpoints for GL_LINES."""
    segments = np.empty((len(origins) * 2, 2), dtype=np.float32)
    segments[0::2] = origins
    segments[1::2] = origins + directions * length
    return segments


# ------------------------
# Renderer
# ------------------------


class Renderer:
    def __init__(self, ctx: moderngl.Context, width: int = 800, height: int = 600):
        self.ctx = ctx
        self.ctx.enable(moderngl.BLEND | moderngl.PROGRAM_POINT_SIZE)
        self.ctx.blend_func = moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA

        self.width = width
        self.height = height
        self.render_mode = DEFAULT_RENDER_MODE

        pygame.font.init()
        self.font = pygame.font.SysFont("monospace", 16)

        base = Path(__file__).parent / "shaders"

        self.bg_prog = self.ctx.program(
            vertex_shader=(base / "background.vert").read_text(),
            fragment_shader=(base / "background.frag").read_text(),
        )
        self.line_prog = self.ctx.program(
            vertex_shader=(base / "line.vert").read_text(),
            fragment_shader=(base / "line.frag").read_text(),
        )
        self.point_prog = self.ctx.program(
            vertex_shader=(base / "point.vert").read_text(),
            fragment_shader=(base / "point.frag").read_text(),
        )
        self.ui_prog = self.ctx.program(
            vertex_shader=(base / "ui.vert").read_text(),
            fragment_shader=(base / "ui.frag").read_text(),
        )

        # Fullscreen quad
        quad = np.array([-1.0, -1.0, 1.0, -1.0, -1.0, 1.0, 1.0, 1.0], dtype="f4")
        self.bg_vbo = self.ctx.buffer(quad.tobytes())
        self.bg_vao = self.ctx.vertex_array(self.bg_prog, [(self.bg_vbo, "2f", "in_pos")])

        # Line geometry (rewritten several times per frame)
        self.line_vbo = self.ctx.buffer(reserve=4096 * 2 * 4, dynamic=True)
        self.line_vao = self.ctx.vertex_array(self.line_prog, [(self.line_vbo, "2f", "in_pos")])

        # Control points: pos, rgba, fill
        self.point_vbo = self.ctx.buffer(reserve=16 * 7 * 4, dynamic=True)
        self.point_vao = self.ctx.vertex_array(
            self.point_prog,
            [(self.point_vbo, "2f 4f 1f", "in_pos", "in_color", "in_fill")],
        )

        # UI quad (updated every frame)
        self.ui_vbo = self.ctx.buffer(reserve=4 * 4 * 4)
        self.ui_vao = self.ctx.vertex_array(
            self.ui_prog,
            [(self.ui_vbo, "2f 2f", "in_pos", "in_uv")],
        )
        self.ui_texture: moderngl.Texture | None = None

        print(f"[Renderer] Initialized at {width}x{height}")

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.ctx.viewport = (0, 0, width, height)

    def cycle_render_mode(self) -> str:
        self.render_mode = (self.render_mode + 1) % len(RENDER_MODES)
        return RENDER_MODES[self.render_mode]

    # ------------------------
    # Draw
    # ------------------------

    def draw(self, frame: RenderFrame, hud_lines: list[str]) -> None:
        self.ctx.clear(0.0, 0.0, 0.0, 1.0)
        resolution = (float(self.width), float(self.height))

        self.bg_prog["u_resolution"].value = resolution  # type: ignore
        self.bg_vao.render(mode=moderngl.TRIANGLE_STRIP)

        self.line_prog["u_resolution"].value = resolution  # type: ignore

        tangents, polygon, targets = mode_layers(RENDER_MODES[self.render_mode])

        self._draw_lines(ribbon(frame.polyline, CURVE_WIDTH), CURVE_COLOR, moderngl.TRIANGLE_STRIP)

        if tangents:
            segments = tangent_segments(
                frame.tangent_origins, frame.tangent_directions, TANGENT_LENGTH
            )
            self._draw_lines(segments, TANGENT_COLOR, moderngl.LINES)

        if polygon:
            outline = np.array(
                [[p.position.x, p.position.y] for p in self._polygon_order(frame)],
                dtype=np.float32,
            )
            self._draw_lines(outline, POLYGON_COLOR, moderngl.LINE_STRIP)

        self._draw_points(frame, with_targets=targets)
        self._draw_ui_overlay(hud_lines)
        pygame.display.flip()

    def _polygon_order(self, frame: RenderFrame):
        by_role = {p.role: p for p in frame.control_points}
        return [
            by_role[ControlRole.ANCHOR_START],
            by_role[ControlRole.HANDLE1],
            by_role[ControlRole.HANDLE2],
            by_role[ControlRole.ANCHOR_END],
        ]

    def _draw_lines(self, verts: VERTS, color: tuple[float, ...], mode: int) -> None:
        if len(verts) == 0:
            return
        data = np.ascontiguousarray(verts, dtype="f4")
        self.line_vbo.orphan(data.nbytes)
        self.line_vbo.write(data.tobytes())
        self.line_prog["u_color"].value = color  # type: ignore
        self.line_vao.render(mode=mode, vertices=len(data))

    def _draw_points(self, frame: RenderFrame, with_targets: bool) -> None:
        rows = []
        if with_targets:
            for target in frame.targets:
                rows.append([target.x, target.y, *TARGET_COLOR, 0.0])
        for point in frame.control_points:
            color, fill = POINT_STYLE[point.role]
            rows.append([point.position.x, point.position.y, *color, fill])

        data = np.array(rows, dtype="f4")
        self.point_vbo.orphan(data.nbytes)
        self.point_vbo.write(data.tobytes())
        self.point_prog["u_resolution"].value = (float(self.width), float(self.height))  # type: ignore
        self.point_prog["u_radius"].value = POINT_RADIUS  # type: ignore
        self.point_vao.render(mode=moderngl.POINTS, vertices=len(data))

    # ------------------------
    # UI Overlay
    # ------------------------

    def _surface_to_texture(self, surface: pygame.Surface) -> moderngl.Texture:
        surface = pygame.transform.flip(surface, False, True)
        data = pygame.image.tobytes(surface, "RGBA", False)

        tex = self.ctx.texture(surface.get_size(), 4, data)
        tex.filter = (moderngl.NEAREST, moderngl.NEAREST)
        return tex

    def _draw_ui_overlay(self, lines: list[str]) -> None:
        if not lines:
            return

        line_h = self.font.get_height()
        w = max(self.font.size(line)[0] for line in lines)
        h = line_h * len(lines)

        surface = pygame.Surface((w, h), pygame.SRCALPHA)
        y = 0
        for line in lines:
            surface.blit(self.font.render(line, True, (220, 220, 220)), (0, y))
            y += line_h

        if self.ui_texture:
            self.ui_texture.release()
        self.ui_texture = self._surface_to_texture(surface)
        self.ui_texture.use(0)

        # Top-left quad in NDC
        margin = 12
        x0 = -1.0 + 2.0 * margin / self.width
        y0 = 1.0 - 2.0 * margin / self.height
        x1 = x0 + 2.0 * w / self.width
        y1 = y0 - 2.0 * h / self.height

        quad = np.array(
            [x0, y0, 0.0, 1.0, x0, y1, 0.0, 0.0, x1, y0, 1.0, 1.0, x1, y1, 1.0, 0.0],
            dtype="f4",
        )
        self.ui_vbo.write(quad.tobytes())
        self.ui_prog["u_texture"] = 0
        self.ui_vao.render(mode=moderngl.TRIANGLE_STRIP)
