"""Rules and state transitions for the numbered-points reflex game."""

from __future__ import annotations

import enum
import logging
import random
import re
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


MARKER_SIZE = 60
MARKER_LIFETIME = 3.0
DECAY_STEP = 0.1
REMAINING_TOLERANCE = 1e-6
DEFAULT_BOX_WIDTH, DEFAULT_BOX_HEIGHT = 650, 400
DEFAULT_REQUESTED_COUNT = 5

DECAY_INTERVAL = 0.1
ELAPSED_INTERVAL = 0.1
ELAPSED_STEP = 10
AUTO_PLAY_INTERVAL = 1.0

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class Status(enum.Enum):
	START = "start"
	PLAYING = "playing"
	ALL_CLEARED = "allCleared"
	GAME_OVER = "gameOver"


@dataclass(frozen=True)
class Marker:
	number: int
	location: Tuple[int, int]
	clicked: bool = False
	remaining: float = MARKER_LIFETIME

	@property
	def opacity(self) -> float:
		return (self.remaining / MARKER_LIFETIME) * 100


@dataclass(frozen=True)
class GameState:
	status: Status = Status.START
	markers: Tuple[Marker, ...] = ()
	current: int = 1
	elapsed: int = 0
	requested_count: int = DEFAULT_REQUESTED_COUNT
	# marker count of the running game; requested_count only applies to the next one
	total: int = 0
	auto_play: bool = False
	show_win_modal: bool = False
	show_lose_modal: bool = False
	game_id: int = 0
	bounds: Tuple[int, int] = (DEFAULT_BOX_WIDTH, DEFAULT_BOX_HEIGHT)

	@property
	def playing(self) -> bool:
		return self.status is Status.PLAYING

	def marker(self, number: int) -> Optional[Marker]:
		for marker in self.markers:
			if marker.number == number:
				return marker
		return None


def sanitize_count(text: object) -> int:
	"""Parse free-form marker-count input, falling back to 1.

	Only the leading integer is read, so ``"12abc"`` gives 12 and ``"3.9"``
	gives 3. Anything non-numeric, zero or negative becomes 1.
	"""
	if isinstance(text, int):
		return max(1, text)
	match = _LEADING_INT.match(str(text) if text is not None else "")
	if not match:
		return 1
	return max(1, int(match.group(1)))


def resolve_bounds(bounds: Optional[Tuple[int, int]]) -> Tuple[int, int]:
	if not bounds:
		return DEFAULT_BOX_WIDTH, DEFAULT_BOX_HEIGHT
	width, height = bounds
	width = int(width) if width and width > 0 else DEFAULT_BOX_WIDTH
	height = int(height) if height and height > 0 else DEFAULT_BOX_HEIGHT
	return width, height


def generate_markers(
	count: int,
	width: int,
	height: int,
	rng: Optional[random.Random] = None,
) -> Tuple[Marker, ...]:
	"""Place ``count`` markers, highest number first, fully inside the box."""
	rng = rng or random.Random()
	span_x = max(0, width - MARKER_SIZE)
	span_y = max(0, height - MARKER_SIZE)
	markers: List[Marker] = []
	for number in range(count, 0, -1):
		x = int(rng.random() * span_x) + 1
		y = int(rng.random() * span_y) + 1
		markers.append(Marker(number=number, location=(min(x, span_x), min(y, span_y))))
	return tuple(markers)


def format_elapsed(elapsed: int) -> str:
	return f"{elapsed / 100:.1f}s"


@dataclass
class GameController:
	"""Single owner of the game snapshot.

	Every operation swaps ``state`` for a new frozen ``GameState`` and returns
	it; callers never mutate the snapshot they read.
	"""

	state: GameState = field(default_factory=GameState)
	rng: random.Random = field(default_factory=random.Random)
	_outcome_hooks: List[Callable[[Status], None]] = field(default_factory=list, repr=False)

	def on_outcome(self, hook: Callable[[Status], None]) -> None:
		self._outcome_hooks.append(hook)

	def _finish(self, outcome: Status) -> None:
		logger.info(
			"Game %d finished: %s (elapsed %s)",
			self.state.game_id,
			outcome.value,
			format_elapsed(self.state.elapsed),
		)
		for hook in self._outcome_hooks:
			hook(outcome)

	def set_requested_count(self, text: object) -> int:
		count = sanitize_count(text)
		if count != self.state.requested_count:
			self.state = replace(self.state, requested_count=count)
		return count

	def start_game(
		self,
		requested_count: Optional[int] = None,
		bounds: Optional[Tuple[int, int]] = None,
	) -> GameState:
		if requested_count is None:
			requested_count = self.state.requested_count
		count = sanitize_count(requested_count)
		width, height = resolve_bounds(bounds)
		self.state = GameState(
			status=Status.PLAYING,
			markers=generate_markers(count, width, height, self.rng),
			current=1,
			elapsed=0,
			requested_count=count,
			total=count,
			auto_play=False,
			show_win_modal=False,
			show_lose_modal=False,
			game_id=self.state.game_id + 1,
			bounds=(width, height),
		)
		logger.info("Game %d started with %d points in %dx%d", self.state.game_id, count, width, height)
		return self.state

	def click_marker(self, number: int) -> GameState:
		state = self.state
		if not state.playing:
			logger.debug("Click on %d ignored, status is %s", number, state.status.value)
			return state
		if number != state.current:
			self.state = replace(
				state,
				status=Status.GAME_OVER,
				auto_play=False,
				show_lose_modal=True,
			)
			logger.info("Point %d clicked while %d was expected", number, state.current)
			self._finish(Status.GAME_OVER)
			return self.state
		if state.current > state.total:
			logger.debug("Every point already clicked, waiting for decay")
			return state
		markers = tuple(
			replace(marker, clicked=True) if marker.number == number else marker
			for marker in state.markers
		)
		self.state = replace(state, markers=markers, current=state.current + 1)
		return self.state

	def toggle_auto_play(self) -> GameState:
		if self.state.playing:
			self.state = replace(self.state, auto_play=not self.state.auto_play)
			logger.debug("Auto play %s", "on" if self.state.auto_play else "off")
		return self.state

	def dismiss_win_modal(self) -> GameState:
		if self.state.show_win_modal:
			self.state = replace(self.state, show_win_modal=False)
		return self.state

	def dismiss_lose_modal(self) -> GameState:
		if self.state.show_lose_modal:
			self.state = replace(self.state, show_lose_modal=False)
		return self.state

	def tick_decay(self) -> GameState:
		state = self.state
		if not state.playing:
			return state
		# Nothing is fading yet, keep the current snapshot.
		if not any(marker.clicked for marker in state.markers):
			return state
		survivors: List[Marker] = []
		for marker in state.markers:
			if not marker.clicked:
				survivors.append(marker)
				continue
			remaining = marker.remaining - DECAY_STEP
			if remaining <= REMAINING_TOLERANCE:
				continue
			survivors.append(replace(marker, remaining=remaining))
		if survivors:
			self.state = replace(state, markers=tuple(survivors))
			return self.state
		self.state = replace(
			state,
			markers=(),
			status=Status.ALL_CLEARED,
			auto_play=False,
			show_win_modal=True,
		)
		self._finish(Status.ALL_CLEARED)
		return self.state

	def tick_elapsed(self) -> GameState:
		if self.state.playing:
			self.state = replace(self.state, elapsed=self.state.elapsed + ELAPSED_STEP)
		return self.state

	def tick_auto(self) -> GameState:
		state = self.state
		if not state.playing or not state.auto_play:
			return state
		return self.click_marker(state.current)
