"""
Roulette window using pygame.

Draws the RouletteView each frame and turns keyboard and mouse input
into controller intents. All roulette logic lives in the controller;
this module only paints and routes input.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional

import pygame

from ..animation.easing import Easing, interpolate_color
from ..app.controller import SLIDER_MAX, SLIDER_MIN, RouletteController
from ..app.view import TITLE, VIEWPORT_HEIGHT, RouletteView, marker_top
from ..audio.engine import AudioEngine
from ..core.events import Event, EventType
from ..spin.selection import ROW_HEIGHT

logger = logging.getLogger(__name__)

WINNER_FADE_SECONDS = 0.6


@dataclass
class WindowConfig:
    """Roulette window configuration."""
    width: int = 800
    height: int = 950
    min_width: int = 600
    min_height: int = 700
    title: str = "Squad EU Roulette"
    fps: int = 60

    # Colors
    bg_color: tuple[int, int, int] = (27, 27, 27)
    panel_color: tuple[int, int, int] = (40, 40, 46)
    viewport_color: tuple[int, int, int] = (10, 10, 10)
    border_color: tuple[int, int, int] = (90, 90, 90)
    text_color: tuple[int, int, int] = (210, 210, 210)
    title_color: tuple[int, int, int] = (255, 215, 0)
    name_color: tuple[int, int, int] = (173, 216, 230)
    players_color: tuple[int, int, int] = (255, 255, 0)
    ok_color: tuple[int, int, int] = (0, 255, 0)
    warn_color: tuple[int, int, int] = (255, 255, 0)
    marker_color: tuple[int, int, int] = (255, 0, 0)
    button_color: tuple[int, int, int] = (60, 60, 70)
    button_disabled_color: tuple[int, int, int] = (45, 45, 50)
    accent_color: tuple[int, int, int] = (100, 150, 255)


class RouletteWindow:
    """
    Main roulette window.

    Keyboard Mapping:
        SPACE / ENTER: Spin
        R: Refresh the server list
        LEFT / RIGHT: Min players -1 / +1 (with SHIFT: 10)
        DOWN / UP: Max players -1 / +1 (with SHIFT: 10)
        C: Copy the winner's name
        M: Toggle click sound
        ESC: Exit
    """

    def __init__(
        self,
        controller: RouletteController,
        audio: Optional[AudioEngine] = None,
        config: Optional[WindowConfig] = None,
    ) -> None:
        self.controller = controller
        self.audio = audio
        self.config = config or WindowConfig()

        self._screen: Optional[pygame.Surface] = None
        self._clock: Optional[pygame.time.Clock] = None
        self._running = False

        self._font: Optional[pygame.font.Font] = None
        self._small_font: Optional[pygame.font.Font] = None
        self._title_font: Optional[pygame.font.Font] = None
        self._big_font: Optional[pygame.font.Font] = None

        self._layout: dict[str, pygame.Rect] = {}
        self._dragging: Optional[str] = None
        self._settled_at: Optional[float] = None

        controller.event_bus.subscribe(EventType.SPIN_SETTLED, self._on_spin_settled)
        controller.event_bus.subscribe(EventType.SPIN_STARTED, self._on_spin_started)

        logger.info("RouletteWindow created")

    def _on_spin_settled(self, event: Event) -> None:
        self._settled_at = time.monotonic()

    def _on_spin_started(self, event: Event) -> None:
        self._settled_at = None

    # Setup

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)

        self._screen = pygame.display.set_mode(
            (self.config.width, self.config.height),
            pygame.RESIZABLE | pygame.DOUBLEBUF,
        )
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._font = self._load_font(18)
        self._small_font = self._load_font(15)
        self._title_font = self._load_font(30, bold=True)
        self._big_font = self._load_font(26, bold=True)

        self._calculate_layout()
        logger.info(f"Pygame initialized: {self.config.width}x{self.config.height}")

    def _load_font(self, size: int, bold: bool = False) -> pygame.font.Font:
        for font_name in ("DejaVu Sans", "Noto Sans", "Arial", "Helvetica"):
            path = pygame.font.match_font(font_name, bold=bold)
            if path:
                return pygame.font.Font(path, size)
        return pygame.font.SysFont(None, size + 4, bold=bold)

    def _calculate_layout(self) -> None:
        """Calculate positions for all UI elements."""
        w = self.config.width
        margin = 20
        inner = w - margin * 2

        self._layout["filters"] = pygame.Rect(margin, 70, inner, 120)
        self._layout["min_slider"] = pygame.Rect(margin + 130, 95, inner - 200, 18)
        self._layout["max_slider"] = pygame.Rect(margin + 130, 125, inner - 200, 18)
        self._layout["refresh"] = pygame.Rect(margin + 15, 152, 130, 30)
        self._layout["spin"] = pygame.Rect(w // 2 - 125, 210, 250, 60)
        self._layout["viewport"] = pygame.Rect(margin, 290, inner, int(VIEWPORT_HEIGHT))
        self._layout["winner"] = pygame.Rect(w // 2 - 200, 640, 400, 170)
        self._layout["copy"] = pygame.Rect(w // 2 - 90, 765, 180, 32)

    # Input

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.VIDEORESIZE:
                self.config.width = max(self.config.min_width, event.w)
                self.config.height = max(self.config.min_height, event.h)
                self._screen = pygame.display.set_mode(
                    (self.config.width, self.config.height),
                    pygame.RESIZABLE | pygame.DOUBLEBUF,
                )
                self._calculate_layout()

            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._handle_click(event.pos)

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self._dragging = None

            elif event.type == pygame.MOUSEMOTION and self._dragging:
                self._drag_slider(self._dragging, event.pos[0])

    def _handle_key(self, event: pygame.event.Event) -> None:
        step = 10 if event.mod & pygame.KMOD_SHIFT else 1
        controller = self.controller

        if event.key == pygame.K_ESCAPE:
            self._running = False
        elif event.key in (pygame.K_SPACE, pygame.K_RETURN):
            controller.request_spin()
        elif event.key == pygame.K_r:
            controller.request_refresh()
        elif event.key == pygame.K_LEFT:
            controller.set_min_players(controller.min_players - step)
        elif event.key == pygame.K_RIGHT:
            controller.set_min_players(controller.min_players + step)
        elif event.key == pygame.K_DOWN:
            controller.set_max_players(controller.max_players - step)
        elif event.key == pygame.K_UP:
            controller.set_max_players(controller.max_players + step)
        elif event.key == pygame.K_c:
            controller.copy_winner_name()
        elif event.key == pygame.K_m and self.audio is not None:
            self.audio.toggle_mute()

    def _handle_click(self, pos: tuple[int, int]) -> None:
        controller = self.controller

        for slider in ("min_slider", "max_slider"):
            if self._layout[slider].inflate(0, 12).collidepoint(pos):
                self._dragging = slider
                self._drag_slider(slider, pos[0])
                return

        if self._layout["refresh"].collidepoint(pos):
            controller.request_refresh()
        elif self._layout["spin"].collidepoint(pos):
            controller.request_spin()
        elif self._layout["copy"].collidepoint(pos):
            controller.copy_winner_name()

    def _drag_slider(self, slider: str, x: int) -> None:
        rect = self._layout[slider]
        t = (x - rect.left) / max(1, rect.width)
        value = round(SLIDER_MIN + (SLIDER_MAX - SLIDER_MIN) * max(0.0, min(1.0, t)))
        if slider == "min_slider":
            self.controller.set_min_players(value)
        else:
            self.controller.set_max_players(value)

    # Rendering

    def _render(self, view: RouletteView) -> None:
        """Render one frame."""
        screen = self._screen
        screen.fill(self.config.bg_color)

        title = self._title_font.render(TITLE, True, self.config.title_color)
        screen.blit(title, title.get_rect(center=(self.config.width // 2, 35)))

        self._render_filters(view)
        self._render_button(
            self._layout["spin"], view.spin_label, view.can_spin, self._big_font
        )
        self._render_viewport(view)

        if view.winner is not None:
            self._render_winner(view)

        pygame.display.flip()

    def _render_filters(self, view: RouletteView) -> None:
        screen = self._screen
        cfg = self.config
        pygame.draw.rect(screen, cfg.panel_color, self._layout["filters"], border_radius=6)

        label = self._font.render("Players:", True, cfg.text_color)
        screen.blit(label, (self._layout["filters"].left + 15, 104))

        self._render_slider(self._layout["min_slider"], view.min_players, "min")
        self._render_slider(self._layout["max_slider"], view.max_players, "max")

        self._render_button(self._layout["refresh"], "Refresh", view.can_refresh, self._font)

        color = cfg.warn_color if view.stale else cfg.ok_color
        status = self._font.render(view.status_text, True, color)
        screen.blit(status, (self._layout["refresh"].right + 15, self._layout["refresh"].top + 5))

    def _render_slider(self, rect: pygame.Rect, value: int, caption: str) -> None:
        screen = self._screen
        cfg = self.config
        pygame.draw.rect(screen, cfg.button_color, rect, border_radius=9)

        filled = rect.copy()
        filled.width = int(rect.width * (value - SLIDER_MIN) / (SLIDER_MAX - SLIDER_MIN))
        pygame.draw.rect(screen, cfg.accent_color, filled, border_radius=9)
        pygame.draw.circle(screen, cfg.text_color, (filled.right, rect.centery), 10)

        text = self._small_font.render(f"{value} {caption}", True, cfg.text_color)
        screen.blit(text, (rect.right + 15, rect.top))

    def _render_button(
        self,
        rect: pygame.Rect,
        label: str,
        enabled: bool,
        font: pygame.font.Font,
    ) -> None:
        cfg = self.config
        color = cfg.button_color if enabled else cfg.button_disabled_color
        text_color = cfg.text_color if enabled else cfg.border_color
        pygame.draw.rect(self._screen, color, rect, border_radius=8)
        pygame.draw.rect(self._screen, cfg.border_color, rect, width=1, border_radius=8)
        text = font.render(label, True, text_color)
        self._screen.blit(text, text.get_rect(center=rect.center))

    def _render_viewport(self, view: RouletteView) -> None:
        screen = self._screen
        cfg = self.config
        area = self._layout["viewport"]

        pygame.draw.rect(screen, cfg.viewport_color, area)

        previous_clip = screen.get_clip()
        screen.set_clip(area)

        if view.empty_text:
            text = self._font.render(view.empty_text, True, cfg.text_color)
            screen.blit(text, text.get_rect(center=area.center))
        else:
            for row in view.rows:
                self._render_row(area, row.y, row.server, row.under_marker and view.winner is not None)

        screen.set_clip(previous_clip)
        pygame.draw.rect(screen, cfg.border_color, area, width=1)

        # Marker line through the centre of the viewport
        line_y = area.top + int(marker_top() + ROW_HEIGHT / 2)
        pygame.draw.line(screen, cfg.marker_color, (area.left, line_y), (area.right, line_y), 3)
        tip = area.right - 10
        pygame.draw.polygon(
            screen,
            cfg.marker_color,
            [(tip - 18, line_y), (tip, line_y - 11), (tip, line_y + 11)],
        )

    def _render_row(self, area: pygame.Rect, y: float, server, highlight: bool) -> None:
        cfg = self.config
        card = pygame.Rect(area.left + 5, area.top + int(y) + 4, area.width - 10, int(ROW_HEIGHT) - 8)
        border = cfg.ok_color if highlight else cfg.border_color
        pygame.draw.rect(self._screen, cfg.panel_color, card, border_radius=6)
        pygame.draw.rect(self._screen, border, card, width=1, border_radius=6)

        name = self._big_font.render(server.name, True, cfg.name_color)
        self._screen.blit(name, name.get_rect(midtop=(card.centerx, card.top + 6)))

        map_text = self._small_font.render(f"Map: {server.map}", True, cfg.text_color)
        players = self._small_font.render(f"Players: {server.player_count}", True, cfg.players_color)
        row_y = card.bottom - 24
        self._screen.blit(map_text, map_text.get_rect(topright=(card.centerx - 10, row_y)))
        self._screen.blit(players, (card.centerx + 10, row_y))

    def _render_winner(self, view: RouletteView) -> None:
        screen = self._screen
        cfg = self.config
        panel = self._layout["winner"]
        winner = view.winner

        fade = 1.0
        if self._settled_at is not None:
            fade = (time.monotonic() - self._settled_at) / WINNER_FADE_SECONDS
        name_color = interpolate_color(cfg.panel_color, cfg.ok_color, fade, Easing.EASE_OUT_QUAD)

        pygame.draw.rect(screen, cfg.panel_color, panel, border_radius=8)
        pygame.draw.rect(screen, cfg.border_color, panel, width=1, border_radius=8)

        header = self._font.render("WINNER:", True, cfg.text_color)
        screen.blit(header, header.get_rect(midtop=(panel.centerx, panel.top + 10)))

        name = self._big_font.render(winner.name, True, name_color)
        screen.blit(name, name.get_rect(midtop=(panel.centerx, panel.top + 38)))

        map_text = self._font.render(f"Map: {winner.map}", True, cfg.text_color)
        screen.blit(map_text, map_text.get_rect(midtop=(panel.centerx, panel.top + 75)))

        self._render_button(self._layout["copy"], "Copy name", True, self._font)

    # Loop

    async def run(self) -> None:
        """Main window loop."""
        # Mixer first, so pygame.init() does not open it with default settings
        if self.audio is not None:
            self.audio.init()
            self.audio.attach(self.controller.event_bus)

        self._init_pygame()
        self._running = True

        logger.info("Window started")

        while self._running:
            self._handle_events()

            self.controller.update()
            self._render(self.controller.view())

            if self._clock:
                self._clock.tick(self.config.fps)

            # Yield to other tasks
            await asyncio.sleep(0)

        self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        if self.audio is not None:
            self.audio.cleanup()
        pygame.quit()
        logger.info("Window closed")


def copy_to_clipboard(text: str) -> None:
    """Place text on the system clipboard via pygame.scrap."""
    try:
        pygame.scrap.put_text(text)
        logger.info(f"Copied to clipboard: {text!r}")
    except pygame.error as e:
        logger.warning(f"Clipboard unavailable: {e}")
