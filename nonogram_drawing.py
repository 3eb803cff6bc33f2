import math
import pygame
from dataclasses import dataclass
from typing import Tuple, Optional, List
from nonogram_model import NonogramModel, LineDescriptors
import grid_style

CLUE_GAP_PX = 6


@dataclass
class Camera:
    offset_x: float = 0.0
    offset_y: float = 0.0
    zoom: float = 1.0

    def screen_to_world(self, sx: float, sy: float) -> Tuple[float, float]:
        return (sx - self.offset_x) / self.zoom, (sy - self.offset_y) / self.zoom

    def world_to_screen(self, wx: float, wy: float) -> Tuple[float, float]:
        return wx * self.zoom + self.offset_x, wy * self.zoom + self.offset_y

    def zoom_at(self, mouse_pos: Tuple[int, int], zoom_factor: float, min_zoom: float, max_zoom: float) -> None:
        mx, my = mouse_pos
        wx, wy = self.screen_to_world(mx, my)

        new_zoom = self.zoom * zoom_factor
        new_zoom = max(min_zoom, min(max_zoom, new_zoom))
        if abs(new_zoom - self.zoom) < 1e-9:
            return

        self.zoom = new_zoom
        self.offset_x = mx - wx * self.zoom
        self.offset_y = my - wy * self.zoom


def clamp_int(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


def draw_grid(
    screen: pygame.Surface,
    model: NonogramModel,
    camera: Camera,
    base_cell_size: int,
    affected_cells: Optional[List[Tuple[int, int]]] = None
) -> None:
    size = model.size
    if size == 0:
        return

    cell_size = base_cell_size * camera.zoom
    if cell_size < 2:
        return

    sw, sh = screen.get_size()
    wl, wt = camera.screen_to_world(-cell_size, -cell_size)
    wr, wb = camera.screen_to_world(sw + cell_size, sh + cell_size)
    c0 = clamp_int(int(math.floor(wl / base_cell_size)), 0, size - 1)
    r0 = clamp_int(int(math.floor(wt / base_cell_size)), 0, size - 1)
    c1 = clamp_int(int(math.ceil(wr / base_cell_size)), 0, size - 1)
    r1 = clamp_int(int(math.ceil(wb / base_cell_size)), 0, size - 1)

    for r in range(r0, r1 + 1):
        for c in range(c0, c1 + 1):
            sx, sy = camera.world_to_screen(c * base_cell_size, r * base_cell_size)
            rect = pygame.Rect(int(sx), int(sy), int(cell_size), int(cell_size))
            cell = model.cells[r][c]

            if not cell.revealed:
                pygame.draw.rect(screen, grid_style.COLOR_HIDDEN, rect)
            elif cell.filled:
                pygame.draw.rect(screen, grid_style.COLOR_FILLED, rect)
            else:
                pygame.draw.rect(screen, grid_style.COLOR_EMPTY, rect)
                inset = max(2, int(cell_size * 0.25))
                inner = rect.inflate(-2 * inset, -2 * inset)
                pygame.draw.line(screen, grid_style.COLOR_CROSS, inner.topleft, inner.bottomright, 2)
                pygame.draw.line(screen, grid_style.COLOR_CROSS, inner.topright, inner.bottomleft, 2)

            pygame.draw.rect(screen, grid_style.COLOR_GRID_LINES, rect, 1)

            if cell.wrong:
                pygame.draw.rect(screen, grid_style.COLOR_WRONG, rect, 3)
            elif affected_cells and (r, c) in affected_cells:
                pygame.draw.rect(screen, grid_style.COLOR_CASCADE_HIGHLIGHT, rect, 2)


def draw_clues(
    screen: pygame.Surface,
    descriptors: LineDescriptors,
    camera: Camera,
    base_cell_size: int,
    font: pygame.font.Font
) -> None:
    """Row clues to the left of the grid, column clues stacked above it."""
    cell_size = base_cell_size * camera.zoom
    if cell_size < 8:
        return

    for r, runs in enumerate(descriptors.rows):
        txt = " ".join(str(n) for n in runs) if runs else "0"
        surf = font.render(txt, True, grid_style.COLOR_TEXT_CLUE)
        sx, sy = camera.world_to_screen(0, r * base_cell_size)
        screen.blit(surf, (sx - surf.get_width() - CLUE_GAP_PX, sy + (cell_size - surf.get_height()) / 2))

    for c, runs in enumerate(descriptors.columns):
        labels = [str(n) for n in runs] if runs else ["0"]
        sx, sy = camera.world_to_screen(c * base_cell_size, 0)
        y = sy - CLUE_GAP_PX
        for txt in reversed(labels):
            surf = font.render(txt, True, grid_style.COLOR_TEXT_CLUE)
            y -= surf.get_height()
            screen.blit(surf, (sx + (cell_size - surf.get_width()) / 2, y))


def pick_cell_from_mouse(model: NonogramModel, camera: Camera, base_cell_size: int, mouse_pos: Tuple[int, int]) -> Optional[Tuple[int, int]]:
    if model.size == 0:
        return None
    mx, my = mouse_pos
    wx, wy = camera.screen_to_world(mx, my)
    c = int(wx // base_cell_size)
    r = int(wy // base_cell_size)
    if model.in_bounds(r, c):
        return (r, c)
    return None
