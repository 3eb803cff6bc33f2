"""
Nonogram (Pygame)

Features:
- Start: choose the board size (multiples of 5), then Play.
- Playing: uncover cells; a row or column whose filled cells are all found fills in its empty cells.
- Complete / Game Over: Restart returns to the start screen.

Controls:
- Left click: guess "filled"
- Right click: guess "empty"
- Hold a button and move: repeat the same guess on every cell crossed
- Middle drag: pan
- Mouse wheel: zoom
"""

import argparse
import logging
from dataclasses import dataclass, field
from typing import Tuple, Optional, List, Sequence

import pygame
import pygame_gui

from nonogram_session import GameConfig, GameSession, Status
from nonogram_drawing import Camera, draw_grid, draw_clues, pick_cell_from_mouse, clamp_int
import grid_style

logger = logging.getLogger(__name__)


# ----------------------------
# UI Constants
# ----------------------------
SIZE_STEP = 5
MAX_BOARD_SIZE = 30
BASE_CELL_SIZE = 32

STATUS_TITLES = {
    Status.START: "Start",
    Status.PLAYING: "Playing",
    Status.COMPLETE: "Complete",
    Status.GAME_OVER: "Game Over",
}


# ----------------------------
# App state
# ----------------------------

@dataclass
class PointerState:
    # Guess repeated while a mouse button is held; None when no button is down.
    guess: Optional[bool] = None
    last_cell: Optional[Tuple[int, int]] = None
    panning: bool = False
    pan_last: Optional[Tuple[int, int]] = None
    affected_cells: List[Tuple[int, int]] = field(default_factory=list)


# ----------------------------
# Helpers
# ----------------------------

def html_escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
         .replace("<", "&lt;")
         .replace(">", "&gt;")
         .replace('"', "&quot;")
         .replace("'", "&#39;")
    )


def status_text(session: GameSession) -> str:
    title = STATUS_TITLES[session.status.get()]
    if session.status.get() is Status.START:
        return f"{title}: board {session.board_size.get()}x{session.board_size.get()}"
    return (
        f"{title}<br>{session.elapsed_seconds} sec<br>"
        f"{session.mistake_count.get()}/{session.max_mistakes} mistakes"
    )


def parse_size_input(text: str) -> Optional[int]:
    """Size entry counts blocks of SIZE_STEP cells, as in '2' -> 10x10."""
    try:
        blocks = int(text.strip())
    except ValueError:
        return None
    return clamp_int(blocks, 1, MAX_BOARD_SIZE // SIZE_STEP) * SIZE_STEP


def size_entry_text(size: int) -> str:
    return str(size // SIZE_STEP)


def board_size_arg(text: str) -> int:
    """argparse type for --size: a multiple of SIZE_STEP up to MAX_BOARD_SIZE."""
    try:
        size = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid board size: {text!r}")
    if size <= 0 or size % SIZE_STEP != 0 or size > MAX_BOARD_SIZE:
        raise argparse.ArgumentTypeError(
            f"board size must be a multiple of {SIZE_STEP} between {SIZE_STEP} and {MAX_BOARD_SIZE}, got {size}"
        )
    return size


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play a random nonogram.")
    parser.add_argument("--size", type=board_size_arg, default=SIZE_STEP, help=f"Board size (cells per side, a multiple of {SIZE_STEP}).")
    parser.add_argument("--max-mistakes", type=int, default=3, help="Mistakes allowed before game over.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the board generator.")
    parser.add_argument("--transitive", action="store_true", help="Re-check every line touched by an auto-completion.")
    parser.add_argument("--verbose", action="store_true", help="Log reveals and cascades.")
    return parser.parse_args(argv)


# ----------------------------
# Main
# ----------------------------

def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    session = GameSession(GameConfig(
        board_size=args.size,
        max_mistakes=args.max_mistakes,
        transitive_completion=args.transitive,
        seed=args.seed,
    ))

    pygame.init()
    pygame.display.set_caption("Nonogram")

    screen = pygame.display.set_mode((1200, 800), pygame.RESIZABLE)
    clock = pygame.time.Clock()

    clue_font = pygame.font.SysFont("arial", 16)

    ui_manager = pygame_gui.UIManager(screen.get_size())

    controls_win = pygame_gui.elements.UIWindow(
        pygame.Rect(20, 20, 260, 300),
        ui_manager,
        window_display_title="Game",
        resizable=True
    )
    controls_win.close_window_button.hide()
    log_win = pygame_gui.elements.UIWindow(
        pygame.Rect(20, 440, 420, 300),
        ui_manager,
        window_display_title="Log",
        resizable=True
    )
    log_win.close_window_button.hide()

    controls_win.set_minimum_dimensions((260, 300))
    log_win.set_minimum_dimensions((420, 200))

    lbl_size = pygame_gui.elements.UILabel(pygame.Rect(10, 10, 130, 26), f"Size (x{SIZE_STEP}):", ui_manager, container=controls_win)
    inp_size = pygame_gui.elements.UITextEntryLine(pygame.Rect(150, 10, 90, 26), ui_manager, container=controls_win)
    inp_size.set_text(size_entry_text(session.board_size.get()))

    btn_play = pygame_gui.elements.UIButton(pygame.Rect(10, 46, 240, 36), "Play", ui_manager, container=controls_win)
    btn_restart = pygame_gui.elements.UIButton(pygame.Rect(10, 92, 240, 36), "Restart", ui_manager, container=controls_win)

    status_box = pygame_gui.elements.UITextBox(
        html_text="",
        relative_rect=pygame.Rect(10, 138, 240, 80),
        manager=ui_manager,
        container=controls_win
    )

    lbl_hint = pygame_gui.elements.UILabel(
        pygame.Rect(10, 224, 240, 30),
        "LMB: filled  RMB: empty",
        ui_manager,
        container=controls_win
    )

    log_box = pygame_gui.elements.UITextBox(
        html_text="",
        relative_rect=pygame.Rect(10, 10, 400, 200),
        manager=ui_manager,
        container=log_win,
        anchors={"left": "left", "right": "right", "top": "top", "bottom": "bottom"}
    )
    btn_clear_log = pygame_gui.elements.UIButton(
        pygame.Rect(10, -40, 120, 30),
        "Clear",
        ui_manager,
        container=log_win,
        anchors={"left": "left", "bottom": "bottom"}
    )

    camera = Camera()
    pointer = PointerState()

    def center_camera() -> None:
        size = session.model.size
        if size == 0:
            return
        sw, sh = screen.get_size()
        grid_px = size * BASE_CELL_SIZE
        camera.zoom = 1.0
        camera.offset_x = (sw - grid_px) * 0.5 + 100
        camera.offset_y = (sh - grid_px) * 0.5 + 60

    log_lines: List[str] = []

    def log_append(msg: str) -> None:
        if not msg:
            return
        for line in msg.splitlines():
            line = line.strip()
            if line:
                log_lines.append(line)

        # Keep a reasonable history
        max_log_lines = 100
        if len(log_lines) > max_log_lines:
            del log_lines[0:len(log_lines) - max_log_lines]

        log_box.set_text("<br>".join(html_escape(ln) for ln in log_lines))

        # Auto-scroll to bottom
        if log_box.scroll_bar is not None:
            log_box.scroll_bar.set_scroll_from_start_percentage(1.0)

    def log_clear() -> None:
        log_lines.clear()
        log_box.set_text("")

    def on_status(status: Status) -> None:
        pointer.guess = None
        pointer.affected_cells = []
        if status is Status.PLAYING:
            center_camera()
            log_append(f"New {session.episode_size}x{session.episode_size} board.")
        elif status is Status.COMPLETE:
            log_append(f"Complete in {session.elapsed_seconds} sec.")
        elif status is Status.GAME_OVER:
            log_append(f"Game over: {session.mistake_count.get()} mistakes.")
        else:
            log_append("Ready.")

    session.status.subscribe(on_status)

    def reveal_at(pos: Tuple[int, int]) -> None:
        cell = pick_cell_from_mouse(session.model, camera, BASE_CELL_SIZE, pos)
        if cell is None or cell == pointer.last_cell or pointer.guess is None:
            return
        pointer.last_cell = cell
        r, c = cell
        if session.reveal_cell(r, c, pointer.guess) and session.last_step is not None:
            pointer.affected_cells = session.last_step.changed_cells
            if session.cell(r, c).wrong:
                log_append(f"Mistake at ({r},{c}).")

    def is_over_ui(pos: Tuple[int, int]) -> bool:
        for w in (controls_win, log_win):
            if w.visible and w.get_abs_rect().collidepoint(pos):
                return True
        return False

    log_append("Ready.")
    last_status_text = ""

    running = True
    while running:
        time_delta = clock.tick(60) / 1000.0
        session.update()

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                break

            if event.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode(event.size, pygame.RESIZABLE)
                ui_manager.set_window_resolution(event.size)

            ui_manager.process_events(event)

            if event.type == pygame_gui.UI_BUTTON_PRESSED:
                if event.ui_element == btn_clear_log:
                    log_clear()

                elif event.ui_element == btn_play:
                    size = parse_size_input(inp_size.get_text())
                    if size is None:
                        log_append("Invalid size.")
                    else:
                        session.request_play(size)

                elif event.ui_element == btn_restart:
                    session.request_restart()

            if event.type == pygame.MOUSEWHEEL:
                if not is_over_ui(pygame.mouse.get_pos()):
                    if event.y > 0:
                        camera.zoom_at(pygame.mouse.get_pos(), 1.1, 0.2, 6.0)
                    elif event.y < 0:
                        camera.zoom_at(pygame.mouse.get_pos(), 1.0 / 1.1, 0.2, 6.0)

            if event.type == pygame.MOUSEBUTTONDOWN and not is_over_ui(event.pos):
                if event.button == 2:
                    pointer.panning = True
                    pointer.pan_last = event.pos
                elif event.button in (1, 3) and session.is_playing:
                    pointer.guess = event.button == 1
                    pointer.last_cell = None
                    reveal_at(event.pos)

            if event.type == pygame.MOUSEMOTION:
                if pointer.panning and pointer.pan_last is not None:
                    mx, my = event.pos
                    lx, ly = pointer.pan_last
                    camera.offset_x += mx - lx
                    camera.offset_y += my - ly
                    pointer.pan_last = event.pos
                elif pointer.guess is not None and not is_over_ui(event.pos):
                    reveal_at(event.pos)

            if event.type == pygame.MOUSEBUTTONUP:
                if event.button == 2:
                    pointer.panning = False
                    pointer.pan_last = None
                elif event.button in (1, 3):
                    pointer.guess = None
                    pointer.last_cell = None

        status = session.status.get()
        if status is Status.START:
            btn_play.enable()
            inp_size.enable()
            btn_restart.disable()
        else:
            btn_play.disable()
            inp_size.disable()
            if status is Status.PLAYING:
                btn_restart.disable()
            else:
                btn_restart.enable()
        shown_status = status_text(session)
        if shown_status != last_status_text:
            status_box.set_text(shown_status)
            last_status_text = shown_status

        ui_manager.update(time_delta)

        screen.fill(grid_style.COLOR_BG)
        if status is not Status.START:
            draw_grid(screen, session.model, camera, BASE_CELL_SIZE, affected_cells=pointer.affected_cells)
            draw_clues(screen, session.descriptors, camera, BASE_CELL_SIZE, clue_font)

        ui_manager.draw_ui(screen)
        pygame.display.flip()

    session.close()
    pygame.quit()


if __name__ == "__main__":
    main()
