# mazerace/app/viewer.py
#!/usr/bin/env python3
"""
Maze Race Viewer - BFS vs DFS on a random maze

- Keyboard:
    [G]          -> generate a new maze
    [B]/[D]      -> run BFS / DFS
    [A]          -> run both (BFS, pause, DFS)
    [R]          -> reset (overlays + stats)
    [+]/[-]      -> animation delay
    [UP]/[DOWN]  -> grid size (applies on next generate)
    [RIGHT]/[LEFT] -> obstacle density (applies on next generate)
    [Q]/[ESC]    -> quit

Settings:
- ENV: MAZERACE_GRID_SIZE, MAZERACE_DENSITY, MAZERACE_SPEED_MS
- CLI: --size=N --density=P --speed=MS
"""

# --- bootstrap import path so `from mazerace...` works when run as a script ---
import sys, os, logging, time
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -------------------------------------------------------------------------------

from typing import List, Tuple, Optional, Dict
import pygame

from mazerace.config import Settings, load_settings
from mazerace.core.scheduler import (
    AnimationScheduler, RunEvent, VISIT, PATH_FOUND, PATH_STEP, NO_PATH, COMPLETE, CLEAR,
)
from mazerace.core.session import Session
from mazerace.core.stats import STATUS_FOUND, STATUS_NO_PATH
from mazerace.core.types import Algorithm, InvalidConfiguration, Pos

# ---------- Config ----------
PANEL_W = 420            # right band: stats + bars + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 28
FONT_NAME = None  # default pygame font
SPEED_STEP_MS = 10
SIZE_STEP = 1
DENSITY_STEP = 5

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
FLOOR       = ( 42, 46, 56)
WALL        = (189,195,199)
START_COL   = ( 26,188,156)
END_COL     = (231, 76, 60)
SNAKE_HEAD  = (251,191, 36)

ALGO_COLORS = {
    Algorithm.BFS: {"visit": (0,149,246,110), "line": (93,187,255), "glow": (0,149,246,70)},
    Algorithm.DFS: {"visit": (236,72,153,110), "line": (255,141,199), "glow": (236,72,153,70)},
}

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
TEXT_DIM    = (150,156,166)
ACCENT_GOLD = (255,210,0)


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.enabled = True

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg = bg_hover if self.hover and self.enabled else bg_idle

        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        hi = pygame.Surface((self.rect.width, 14), pygame.SRCALPHA)
        pygame.draw.rect(hi, (255,255,255,20), hi.get_rect(), border_radius=10)
        base.blit(hi, (0,0))
        screen.blit(base, self.rect.topleft)

        color = (235,238,242) if self.enabled else TEXT_DIM
        text = font.render(self.label, True, color)
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event):
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            # inert while a run is active
            if self.enabled and self.rect.collidepoint(event.pos):
                self.callback()


# ---------- Viewer ----------
class Viewer:
    def __init__(self, session: Session):
        pygame.init()

        self.session = session
        self.settings: Settings = session.settings
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        grid = session.grid
        self.cell_size = self._auto_cell_size(grid.rows)
        grid_px_w = GRID_MARGIN*2 + grid.cols * self.cell_size
        grid_px_h = GRID_MARGIN*2 + grid.rows * self.cell_size
        win_w = grid_px_w + PANEL_W
        win_h = max(grid_px_h, 720)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("Maze Race: BFS vs DFS")

        self._buttons: list[UIButton] = []
        self._layout(win_w, win_h)

        self.visited: Dict[Pos, Algorithm] = {}
        self.path: List[Pos] = []
        self.path_algo: Optional[Algorithm] = None
        self.scheduler: Optional[AnimationScheduler] = None
        self.message = "Ready"
        self.clock = pygame.time.Clock()

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and center the grid."""
        grid = self.session.grid
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(6, min(avail_w // grid.cols, avail_h // grid.rows)))

        plate_w = grid.cols * self.cell_size + 2 * GRID_MARGIN
        plate_h = grid.rows * self.cell_size + 2 * GRID_MARGIN
        left_x = max(0, (win_w - (plate_w + PANEL_W)) // 2)
        top_y  = max(0, (win_h - plate_h) // 2)

        self.canvas_rect = pygame.Rect(left_x, top_y, plate_w, plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN,
                             self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right), win_h)
        self._build_buttons()

    def _auto_cell_size(self, rows: int) -> int:
        target_h = 720 - GRID_MARGIN*2
        return max(8, min(CELL_SIZE_DEFAULT, target_h // rows))

    def run(self):
        while True:
            self._handle_events()
            if self.scheduler is not None:
                self._tick_scheduler()
            self._draw()
            self.clock.tick(60)

    # ---------- run driving ----------
    def _tick_scheduler(self):
        for ev in self.scheduler.tick(time.monotonic()):
            self._apply_event(ev)
        if self.scheduler.finished:
            self.scheduler = None
            self._refresh_enabled()

    def _apply_event(self, ev: RunEvent):
        if ev.kind == VISIT:
            self.visited[ev.cell] = ev.algorithm
        elif ev.kind == PATH_FOUND:
            self.path = []
            self.path_algo = ev.algorithm
        elif ev.kind == PATH_STEP:
            self.path.append(ev.cell)
        elif ev.kind == NO_PATH:
            self.message = f"{ev.algorithm.label}: {STATUS_NO_PATH}"
        elif ev.kind == CLEAR:
            self._reset_overlays()
        elif ev.kind == COMPLETE:
            if ev.stats and ev.stats.path_length:
                self.message = f"{ev.algorithm.label}: {STATUS_FOUND}"

    def _start(self, events):
        if events is None:
            return  # a run is already going
        self._reset_overlays()
        self.scheduler = AnimationScheduler(events, clock=time.monotonic)
        self.message = "Running..."
        self._refresh_enabled()

    def _run_algo(self, algo: Algorithm):
        self._start(self.session.start_run(algo, self.settings.animation_speed_ms))

    def _run_both(self):
        self._start(self.session.start_run_both(self.settings.animation_speed_ms))

    def _generate(self):
        try:
            grid = self.session.generate(self.settings.rows, self.settings.cols,
                                         self.settings.obstacle_density_percent)
        except InvalidConfiguration as ex:
            self.message = f"Invalid configuration: {ex}"
            return
        if grid is None:
            return
        self._reset_overlays()
        self.message = "Ready"
        self._layout(*self.screen.get_size())

    def _reset(self):
        if self.session.reset():
            self._reset_overlays()
            self.message = "Ready"

    def _reset_overlays(self):
        self.visited.clear()
        self.path = []
        self.path_algo = None

    def _bump_speed(self, dv: int):
        self.settings = self.settings.with_changes(animation_speed_ms=self.settings.animation_speed_ms + dv)

    def _bump_size(self, dv: int):
        self.settings = self.settings.with_changes(grid_size=self.settings.grid_size + dv)

    def _bump_density(self, dv: int):
        self.settings = self.settings.with_changes(
            obstacle_density_percent=self.settings.obstacle_density_percent + dv)

    def _handle_events(self):
        busy = self.session.is_running
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._bump_speed(+SPEED_STEP_MS)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self._bump_speed(-SPEED_STEP_MS)
                elif busy:
                    continue
                elif e.key == pygame.K_g:
                    self._generate()
                elif e.key == pygame.K_b:
                    self._run_algo(Algorithm.BFS)
                elif e.key == pygame.K_d:
                    self._run_algo(Algorithm.DFS)
                elif e.key == pygame.K_a:
                    self._run_both()
                elif e.key == pygame.K_r:
                    self._reset()
                elif e.key == pygame.K_UP:
                    self._bump_size(+SIZE_STEP)
                elif e.key == pygame.K_DOWN:
                    self._bump_size(-SIZE_STEP)
                elif e.key == pygame.K_RIGHT:
                    self._bump_density(+DENSITY_STEP)
                elif e.key == pygame.K_LEFT:
                    self._bump_density(-DENSITY_STEP)
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((max(640, e.w), max(480, e.h)), pygame.RESIZABLE)
                self._layout(*self.screen.get_size())
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                for b in self._buttons:
                    b.handle_mouse(e)

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_panel()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        top = (24, 26, 32); bot = (36, 40, 48)
        for y in range(h):
            t = y / max(1, h-1)
            c = (
                int(top[0] + (bot[0]-top[0]) * t),
                int(top[1] + (bot[1]-top[1]) * t),
                int(top[2] + (bot[2]-top[2]) * t),
            )
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _cell_rect(self, p: Pos) -> pygame.Rect:
        cs = self.cell_size
        ox, oy = self._grid_origin
        row, col = p
        return pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)

    def _cell_center(self, p: Pos) -> Tuple[int, int]:
        return self._cell_rect(p).center

    def _draw_grid(self):
        grid = self.session.grid
        cs = self.cell_size

        for p in grid.positions():
            rect = self._cell_rect(p)
            cell = grid.cell(p)
            if cell.is_start:
                pygame.draw.rect(self.screen, START_COL, rect)
            elif cell.is_end:
                pygame.draw.rect(self.screen, END_COL, rect)
            elif cell.is_wall:
                pygame.draw.rect(self.screen, WALL, rect)
            else:
                pygame.draw.rect(self.screen, FLOOR, rect)
            pygame.draw.rect(self.screen, BLACK, rect, 1)

        # visit overlays
        for p, algo in self.visited.items():
            s = pygame.Surface((cs, cs), pygame.SRCALPHA); s.fill(ALGO_COLORS[algo]["visit"])
            self.screen.blit(s, self._cell_rect(p).topleft)

        # path, drawn as far as playback has reached
        if self.path_algo is not None and len(self.path) >= 2:
            colors = ALGO_COLORS[self.path_algo]
            pts = [self._cell_center(p) for p in self.path]
            glow = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)
            pygame.draw.lines(glow, colors["glow"], False, pts, max(3, int(cs * 0.4)))
            self.screen.blit(glow, (0,0))
            pygame.draw.lines(self.screen, colors["line"], False, pts, max(2, int(cs * 0.25)))
            pygame.draw.circle(self.screen, SNAKE_HEAD, pts[-1], max(3, int(cs * 0.3)))

        for p, label in ((grid.start, "S"), (grid.end, "E")):
            txt = self.font_small.render(label, True, WHITE)
            self.screen.blit(txt, txt.get_rect(center=self._cell_center(p)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 420  # stats card + bars above
        w = max(160, rb.width - 32)
        h = 34
        gap = 8
        half = (w - 8) // 2

        def add(label, cb, rect):
            btn = UIButton(label, rect, cb)
            self._buttons.append(btn)
            return btn

        add("Generate Maze", self._generate, pygame.Rect(x, y, w, h)); y += h + gap
        add("Run BFS", lambda: self._run_algo(Algorithm.BFS), pygame.Rect(x, y, half, h))
        add("Run DFS", lambda: self._run_algo(Algorithm.DFS), pygame.Rect(x + half + 8, y, half, h)); y += h + gap
        add("Run Both", self._run_both, pygame.Rect(x, y, half, h))
        add("Reset", self._reset, pygame.Rect(x + half + 8, y, half, h)); y += h + gap
        add("Speed −", lambda: self._bump_speed(-SPEED_STEP_MS), pygame.Rect(x, y, half, h))
        add("Speed +", lambda: self._bump_speed(+SPEED_STEP_MS), pygame.Rect(x + half + 8, y, half, h)); y += h + gap
        add("Size −", lambda: self._bump_size(-SIZE_STEP), pygame.Rect(x, y, half, h))
        add("Size +", lambda: self._bump_size(+SIZE_STEP), pygame.Rect(x + half + 8, y, half, h)); y += h + gap
        add("Density −", lambda: self._bump_density(-DENSITY_STEP), pygame.Rect(x, y, half, h))
        add("Density +", lambda: self._bump_density(+DENSITY_STEP), pygame.Rect(x + half + 8, y, half, h))
        self._refresh_enabled()

    def _refresh_enabled(self):
        busy = self.session.is_running
        for b in self._buttons:
            b.enabled = not busy

    def _draw_card(self, rect: pygame.Rect):
        card = pygame.Surface(rect.size, pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, rect.topleft)

    def _draw_panel(self):
        rb = self._right_band
        self._draw_card(pygame.Rect(rb.x + 10, rb.y + 10, rb.width - 20, 200))

        stats = self.session.stats
        y0 = rb.y + 18
        header = self.font_big.render("Metrics", True, ACCENT_GOLD)
        self.screen.blit(header, (rb.x + 24, y0))
        y0 += header.get_height() + 8

        col_w = (rb.width - 48) // 2
        for i, algo in enumerate((Algorithm.BFS, Algorithm.DFS)):
            x0 = rb.x + 24 + i * col_w
            yy = y0
            title = self.font.render(algo.label, True, ALGO_COLORS[algo]["line"])
            self.screen.blit(title, (x0, yy)); yy += title.get_height() + 6
            for text in stats.display_rows(algo):
                surf = self.font_small.render(text, True, TEXT_LIGHT)
                self.screen.blit(surf, (x0, yy)); yy += surf.get_height() + 5

        s = self.settings
        info = [
            self.message,
            f"Next maze: {s.grid_size}x{s.grid_size}, {s.obstacle_density_percent}% walls",
            f"Speed: {s.animation_speed_ms} ms/step",
        ]
        yy = rb.y + 150
        for text in info:
            surf = self.font_small.render(text, True, TEXT_DIM)
            self.screen.blit(surf, (rb.x + 24, yy)); yy += surf.get_height() + 4

        self._draw_bars(pygame.Rect(rb.x + 10, rb.y + 220, rb.width - 20, 190))

        for b in self._buttons:
            b.draw(self.screen, self.font)

    def _draw_bars(self, rect: pygame.Rect):
        """Four side-by-side comparisons, one pair of bars each."""
        self._draw_card(rect)
        series = self.session.stats.chart_series()
        slot_w = (rect.width - 20) // len(series)
        base_y = rect.bottom - 34
        max_h = rect.height - 60
        for i, item in enumerate(series):
            x0 = rect.x + 10 + i * slot_w
            top = max(1, max(item["values"]))
            for j, (algo, value) in enumerate(zip((Algorithm.BFS, Algorithm.DFS), item["values"])):
                bh = int(max_h * value / top)
                bar = pygame.Rect(x0 + 8 + j * (slot_w // 2 - 4), base_y - bh, slot_w // 2 - 12, bh)
                pygame.draw.rect(self.screen, ALGO_COLORS[algo]["line"], bar, border_radius=3)
                val = self.font_small.render(str(value), True, TEXT_LIGHT)
                self.screen.blit(val, val.get_rect(midbottom=(bar.centerx, bar.top - 2)))
            label = self.font_small.render(item["key"], True, TEXT_DIM)
            self.screen.blit(label, label.get_rect(midtop=(x0 + slot_w // 2, base_y + 6)))


# ---------- main ----------
def main(argv=None):
    logging.basicConfig(level=os.getenv("MAZERACE_LOG_LEVEL", "WARNING").upper(),
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    try:
        settings = load_settings(argv=argv)
        session = Session(settings)
        session.generate()
    except InvalidConfiguration as ex:
        print(f"Invalid configuration: {ex}")
        sys.exit(2)
    Viewer(session).run()

if __name__ == "__main__":
    main()
