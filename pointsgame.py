"""Numbered-points reflex game rendered with pygame."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Tuple

import pygame

from config import Config
from game_state import GameController, Marker, Status, format_elapsed
from tickers import TickerSchedule

logger = logging.getLogger(__name__)


WIDTH, HEIGHT = 760, 690
FPS = 60
FONT_LARGE_SIZE = 30
FONT_SMALL_SIZE = 16
MARKER_RADIUS = 26
BOX_RECT = (55, 270, 650, 400)

BG_COLOR = (243, 244, 246)
CARD_COLOR = (255, 255, 255)
CARD_BORDER = (229, 231, 235)
TEXT_DARK = (31, 41, 55)
TEXT_MUTED = (75, 85, 99)
BLUE = (37, 99, 235)
BLUE_LIGHT = (59, 130, 246)
GREEN = (34, 197, 94)
RED = (239, 68, 68)
PURPLE = (168, 85, 247)
GRAY = (107, 114, 128)
ORANGE = (249, 115, 22)
BOX_COLOR = (249, 250, 251)
BOX_BORDER = (209, 213, 219)
WHITE = (255, 255, 255)

STATUS_BANNER = {
	Status.START: ("Let's Play", BLUE),
	Status.PLAYING: ("Let's Play", BLUE),
	Status.ALL_CLEARED: ("All Cleared", GREEN),
	Status.GAME_OVER: ("Game Over", RED),
}


def marker_at(
	markers: Iterable[Marker],
	pos: Tuple[int, int],
	origin: Tuple[int, int] = (0, 0),
) -> Optional[int]:
	"""Return the number of the topmost marker under ``pos``, if any."""
	hit: Optional[int] = None
	px = pos[0] - origin[0]
	py = pos[1] - origin[1]
	for marker in markers:
		cx = marker.location[0] + MARKER_RADIUS
		cy = marker.location[1] + MARKER_RADIUS
		if (px - cx) ** 2 + (py - cy) ** 2 <= MARKER_RADIUS ** 2:
			# later markers are drawn on top
			hit = marker.number
	return hit


class PointsGame:
	def __init__(self, controller: Optional[GameController] = None) -> None:
		pygame.init()
		pygame.display.set_caption("Points Game")
		self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
		self.clock = pygame.time.Clock()
		self.font_large = pygame.font.SysFont("consolas", FONT_LARGE_SIZE)
		self.font_small = pygame.font.SysFont("consolas", FONT_SMALL_SIZE)

		self.controller = controller or GameController()
		self.tickers = TickerSchedule(self.controller)

		self.banner_rect = pygame.Rect(40, 86, WIDTH - 80, 44)
		self.panel_rect = pygame.Rect(40, 140, WIDTH - 80, 72)
		self.input_rect = pygame.Rect(150, 148, 140, 28)
		self.primary_button = pygame.Rect(40, 222, 170, 36)
		self.auto_button = pygame.Rect(226, 222, 170, 36)
		self.box_rect = pygame.Rect(*BOX_RECT)
		self.modal_buttons: Dict[str, pygame.Rect] = {}

		self.input_focused = False
		self.count_text = str(self.controller.set_requested_count(Config.DEFAULT_COUNT))

	@property
	def state(self):
		return self.controller.state

	def modal_open(self) -> bool:
		return self.state.show_win_modal or self.state.show_lose_modal

	def start_game(self) -> None:
		self.input_focused = False
		self.controller.start_game(bounds=(self.box_rect.width, self.box_rect.height))
		self.count_text = str(self.state.requested_count)
		self.tickers.sync()

	def toggle_auto_play(self) -> None:
		self.controller.toggle_auto_play()
		self.tickers.sync()

	def click_marker(self, number: int) -> None:
		self.controller.click_marker(number)
		self.tickers.sync()

	def close_modal(self) -> None:
		self.controller.dismiss_win_modal()
		self.controller.dismiss_lose_modal()

	def edit_count(self, text: str) -> None:
		self.count_text = str(self.controller.set_requested_count(text))

	def update(self, dt: float) -> None:
		self.tickers.advance(dt)

	def handle_click(self, pos: Tuple[int, int]) -> None:
		if self.modal_open():
			self.handle_modal_click(pos)
			return
		if self.input_rect.collidepoint(pos):
			self.input_focused = True
			return
		self.input_focused = False
		if self.primary_button.collidepoint(pos):
			self.start_game()
			return
		if self.state.playing and self.auto_button.collidepoint(pos):
			self.toggle_auto_play()
			return
		if self.box_rect.collidepoint(pos):
			number = marker_at(self.state.markers, pos, self.box_rect.topleft)
			if number is not None:
				self.click_marker(number)

	def handle_modal_click(self, pos: Tuple[int, int]) -> None:
		action = next(
			(name for name, rect in self.modal_buttons.items() if rect.collidepoint(pos)),
			None,
		)
		if action == "again":
			self.start_game()
		elif action == "close":
			self.close_modal()

	def handle_key(self, event: pygame.event.Event) -> bool:
		"""Apply a key press. Returns False when the window should close."""
		if event.key == pygame.K_ESCAPE:
			if self.modal_open():
				self.close_modal()
				return True
			return False
		if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
			self.start_game()
		elif self.input_focused:
			if event.key == pygame.K_BACKSPACE:
				self.edit_count(self.count_text[:-1])
			elif event.unicode.isdigit():
				self.edit_count(self.count_text + event.unicode)
		elif event.key == pygame.K_a and not self.modal_open():
			self.toggle_auto_play()
		return True

	def draw_header(self) -> None:
		title = self.font_large.render("Points Game", True, TEXT_DARK)
		self.screen.blit(title, (WIDTH // 2 - title.get_width() // 2, 18))
		sub = self.font_small.render("Click the points in numerical order!", True, TEXT_MUTED)
		self.screen.blit(sub, (WIDTH // 2 - sub.get_width() // 2, 56))

	def draw_banner(self) -> None:
		pygame.draw.rect(self.screen, CARD_COLOR, self.banner_rect, border_radius=10)
		pygame.draw.rect(self.screen, CARD_BORDER, self.banner_rect, width=1, border_radius=10)
		label, color = STATUS_BANNER[self.state.status]
		text = self.font_large.render(label, True, color)
		self.screen.blit(
			text,
			(self.banner_rect.centerx - text.get_width() // 2, self.banner_rect.centery - text.get_height() // 2),
		)

	def draw_panel(self) -> None:
		pygame.draw.rect(self.screen, CARD_COLOR, self.panel_rect, border_radius=10)
		pygame.draw.rect(self.screen, CARD_BORDER, self.panel_rect, width=1, border_radius=10)
		points_label = self.font_small.render("Points:", True, TEXT_MUTED)
		self.screen.blit(points_label, (self.panel_rect.x + 20, self.input_rect.y + 5))
		border = BLUE_LIGHT if self.input_focused else BOX_BORDER
		pygame.draw.rect(self.screen, WHITE, self.input_rect, border_radius=6)
		pygame.draw.rect(self.screen, border, self.input_rect, width=2, border_radius=6)
		caret = "|" if self.input_focused else ""
		value = self.font_small.render(self.count_text + caret, True, TEXT_DARK)
		self.screen.blit(value, (self.input_rect.x + 8, self.input_rect.y + 5))

		time_label = self.font_small.render("Time:", True, TEXT_MUTED)
		time_y = self.input_rect.bottom + 10
		self.screen.blit(time_label, (self.panel_rect.x + 20, time_y))
		time_text = self.font_small.render(format_elapsed(self.state.elapsed), True, BLUE)
		self.screen.blit(time_text, (self.input_rect.x + 8, time_y))

	def draw_button(self, rect: pygame.Rect, label: str, color: Tuple[int, int, int]) -> None:
		pygame.draw.rect(self.screen, color, rect, border_radius=8)
		text = self.font_small.render(label, True, WHITE)
		self.screen.blit(
			text,
			(rect.centerx - text.get_width() // 2, rect.centery - text.get_height() // 2),
		)

	def draw_buttons(self) -> None:
		if self.state.status is Status.START:
			self.draw_button(self.primary_button, "Start Game", BLUE_LIGHT)
			return
		self.draw_button(self.primary_button, "Restart", GREEN)
		if self.state.playing:
			if self.state.auto_play:
				self.draw_button(self.auto_button, "Auto Play OFF", RED)
			else:
				self.draw_button(self.auto_button, "Auto Play ON", PURPLE)

	def draw_box(self) -> None:
		pygame.draw.rect(self.screen, BOX_COLOR, self.box_rect, border_radius=12)
		pygame.draw.rect(self.screen, BOX_BORDER, self.box_rect, width=4, border_radius=12)

	def draw_marker(self, marker: Marker) -> None:
		size = MARKER_RADIUS * 2
		surface = pygame.Surface((size, size), pygame.SRCALPHA)
		center = (MARKER_RADIUS, MARKER_RADIUS)
		if marker.clicked:
			pygame.draw.circle(surface, ORANGE, center, MARKER_RADIUS)
			number_color = WHITE
		else:
			pygame.draw.circle(surface, WHITE, center, MARKER_RADIUS)
			pygame.draw.circle(surface, ORANGE, center, MARKER_RADIUS, width=2)
			number_color = TEXT_DARK
		number = self.font_small.render(str(marker.number), True, number_color)
		if marker.clicked:
			remaining = self.font_small.render(f"{marker.remaining:.2f}s", True, WHITE)
			surface.blit(number, (MARKER_RADIUS - number.get_width() // 2, MARKER_RADIUS - number.get_height()))
			surface.blit(remaining, (MARKER_RADIUS - remaining.get_width() // 2, MARKER_RADIUS))
			surface.set_alpha(max(0, min(255, int(255 * marker.opacity / 100))))
		else:
			surface.blit(
				number,
				(MARKER_RADIUS - number.get_width() // 2, MARKER_RADIUS - number.get_height() // 2),
			)
		x = self.box_rect.x + marker.location[0]
		y = self.box_rect.y + marker.location[1]
		self.screen.blit(surface, (x, y))

	def draw_markers(self) -> None:
		for marker in self.state.markers:
			self.draw_marker(marker)

	def draw_modal(self) -> None:
		self.modal_buttons = {}
		if not self.modal_open():
			return
		state = self.state
		if state.show_win_modal:
			title, color, again = "You Won!", GREEN, "Play Again"
			lines = [
				f"You successfully cleared all {state.total} points",
				f"in {state.elapsed / 100:.1f} seconds!",
			]
		else:
			title, color, again = "You Lost!", RED, "Try Again"
			lines = ["You clicked the wrong point. Try again!"]
		dimmer = pygame.Surface((WIDTH, HEIGHT), pygame.SRCALPHA)
		dimmer.fill((0, 0, 0, 130))
		self.screen.blit(dimmer, (0, 0))
		panel_rect = pygame.Rect(0, 0, 460, 240)
		panel_rect.center = (WIDTH // 2, HEIGHT // 2)
		pygame.draw.rect(self.screen, CARD_COLOR, panel_rect, border_radius=14)
		heading = self.font_large.render(title, True, color)
		self.screen.blit(heading, (panel_rect.centerx - heading.get_width() // 2, panel_rect.y + 30))
		line_y = panel_rect.y + 84
		for line in lines:
			text = self.font_small.render(line, True, TEXT_MUTED)
			self.screen.blit(text, (panel_rect.centerx - text.get_width() // 2, line_y))
			line_y += 24
		again_rect = pygame.Rect(0, 0, 140, 38)
		close_rect = pygame.Rect(0, 0, 140, 38)
		again_rect.bottomright = (panel_rect.centerx - 8, panel_rect.bottom - 26)
		close_rect.bottomleft = (panel_rect.centerx + 8, panel_rect.bottom - 26)
		self.draw_button(again_rect, again, color)
		self.draw_button(close_rect, "Close", GRAY)
		self.modal_buttons = {"again": again_rect, "close": close_rect}

	def draw(self) -> None:
		self.screen.fill(BG_COLOR)
		self.draw_header()
		self.draw_banner()
		self.draw_panel()
		self.draw_buttons()
		self.draw_box()
		self.draw_markers()
		self.draw_modal()

	def run(self) -> None:
		running = True
		while running:
			dt = self.clock.tick(FPS) / 1000.0
			for event in pygame.event.get():
				if event.type == pygame.QUIT:
					running = False
				elif event.type == pygame.KEYDOWN:
					running = self.handle_key(event)
				elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
					self.handle_click(event.pos)

			self.update(dt)
			self.draw()
			pygame.display.flip()

		pygame.quit()


def main() -> None:
	logging.basicConfig(
		level=Config.LOG_LEVEL,
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
	PointsGame().run()


if __name__ == "__main__":
	main()
