"""Periodic tasks that drive a running game from the frame loop."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Tuple

from game_state import (
	AUTO_PLAY_INTERVAL,
	DECAY_INTERVAL,
	ELAPSED_INTERVAL,
	GameController,
)

logger = logging.getLogger(__name__)

TASK_ORDER = ("elapsed", "decay", "auto")
# absorbs float drift from summing frame deltas
TIMING_TOLERANCE = 1e-9


class PeriodicTask:
	def __init__(self, name: str, interval: float, callback: Callable[[], object]) -> None:
		if interval <= 0:
			raise ValueError("interval must be positive")
		self.name = name
		self.interval = interval
		self.callback = callback
		self.accumulated = 0.0
		self.fired = 0
		self.cancelled = False

	def advance(self, dt: float) -> int:
		"""Feed ``dt`` seconds in and fire once per whole interval elapsed."""
		if self.cancelled:
			return 0
		self.accumulated += dt
		fired = 0
		while not self.cancelled and self.accumulated + TIMING_TOLERANCE >= self.interval:
			self.accumulated -= self.interval
			self.callback()
			self.fired += 1
			fired += 1
		return fired

	def cancel(self) -> None:
		self.cancelled = True


class TickerSchedule:
	"""Keeps the decay, elapsed-time and auto-play tasks in step with the game.

	Tasks only exist while a game is playing. Each new game gets fresh task
	objects, and the auto-play task is rebuilt whenever auto-play or the
	expected number changes so its countdown restarts from zero.
	"""

	def __init__(self, controller: GameController) -> None:
		self.controller = controller
		self.tasks: Dict[str, PeriodicTask] = {}
		self._game_id: Optional[int] = None
		self._auto_key: Optional[Tuple[bool, int]] = None

	def _cancel(self, name: str) -> None:
		task = self.tasks.pop(name, None)
		if task is not None:
			task.cancel()
			logger.debug("Cancelled %s ticker after %d ticks", name, task.fired)

	def cancel_all(self) -> None:
		for name in list(self.tasks):
			self._cancel(name)
		self._game_id = None
		self._auto_key = None

	def sync(self) -> None:
		state = self.controller.state
		if not state.playing:
			if self.tasks:
				self.cancel_all()
			return
		if state.game_id != self._game_id:
			self.cancel_all()
			self._game_id = state.game_id
			self.tasks["elapsed"] = PeriodicTask("elapsed", ELAPSED_INTERVAL, self.controller.tick_elapsed)
			self.tasks["decay"] = PeriodicTask("decay", DECAY_INTERVAL, self.controller.tick_decay)
			logger.debug("Scheduled tickers for game %d", state.game_id)
		auto_key = (state.auto_play, state.current)
		if auto_key != self._auto_key:
			self._cancel("auto")
			self._auto_key = auto_key
			if state.auto_play:
				self.tasks["auto"] = PeriodicTask("auto", AUTO_PLAY_INTERVAL, self.controller.tick_auto)

	def advance(self, dt: float) -> None:
		self.sync()
		for name in TASK_ORDER:
			task = self.tasks.get(name)
			if task is None:
				continue
			task.advance(dt)
			self.sync()

	def active(self, name: str) -> bool:
		task = self.tasks.get(name)
		return task is not None and not task.cancelled
