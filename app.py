"""Gradio wrapper to play the Points Game in a browser."""

from __future__ import annotations

import logging
import os
import threading
from typing import Optional, Tuple

# Ensure pygame can initialize without a physical display/audio device.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import gradio as gr
import numpy as np
import pygame

import pointsgame
from config import Config
from game_state import Status, format_elapsed

logger = logging.getLogger(__name__)


class GameSession:
    """Continuously runs the pygame simulation and exposes helper controls."""

    def __init__(self) -> None:
        pygame.init()
        self.game = pointsgame.PointsGame()
        self.game.controller.on_outcome(self._record_outcome)
        self.lock = threading.Lock()
        self.running = True
        self.last_outcome: Optional[Status] = None
        self.last_frame: Optional[np.ndarray] = None
        self.last_status: str = "Booting..."
        self._loop_thread = threading.Thread(target=self._loop, daemon=True)
        self._loop_thread.start()

    def _record_outcome(self, outcome: Status) -> None:
        self.last_outcome = outcome

    def _loop(self) -> None:
        while self.running:
            dt = self.game.clock.tick(Config.HEADLESS_FPS) / 1000.0
            pygame.event.pump()
            with self.lock:
                self.game.update(dt)
                self.last_frame, self.last_status = self._render_locked()

    def _render_locked(self) -> Tuple[np.ndarray, str]:
        self.game.draw()
        pygame.display.flip()
        frame = pygame.surfarray.array3d(self.game.screen)
        frame = np.transpose(frame, (1, 0, 2))
        return frame, self._status_text()

    def _status_text(self) -> str:
        state = self.game.state
        label = pointsgame.STATUS_BANNER[state.status][0]
        parts = [
            f"**{label}**",
            f"Points {state.requested_count}",
            f"Next {min(state.current, state.total)}",
            f"Time {format_elapsed(state.elapsed)}",
            f"Auto play {'on' if state.auto_play else 'off'}",
        ]
        if state.show_win_modal:
            parts.append("You Won!")
        elif state.show_lose_modal:
            parts.append("You Lost!")
        if self.last_outcome is not None:
            result = "won" if self.last_outcome is Status.ALL_CLEARED else "lost"
            parts.append(f"Last round {result}")
        return " • ".join(parts)

    def get_frame(self) -> Tuple[np.ndarray, str]:
        with self.lock:
            if self.last_frame is None:
                self.last_frame, self.last_status = self._render_locked()
            return self.last_frame.copy(), self.last_status

    def click(self, coords: Tuple[int, int]) -> None:
        pos = (int(coords[0]), int(coords[1]))
        with self.lock:
            self.game.handle_click(pos)
            self.last_frame, self.last_status = self._render_locked()

    def command(self, action: str, text: str = "") -> None:
        with self.lock:
            if action == "start":
                self.game.edit_count(text)
                self.game.start_game()
            elif action == "auto":
                self.game.toggle_auto_play()
            elif action == "close":
                self.game.close_modal()
            elif action == "count":
                self.game.edit_count(text)
            self.last_frame, self.last_status = self._render_locked()

    def count_text(self) -> str:
        with self.lock:
            return self.game.count_text

    def auto_label(self) -> str:
        with self.lock:
            return "Auto Play OFF" if self.game.state.auto_play else "Auto Play ON"


session: Optional[GameSession] = None


def get_session() -> GameSession:
    global session
    if session is None:
        session = GameSession()
    return session


def startup() -> Tuple[np.ndarray, str]:
    return get_session().get_frame()


def refresh_view() -> Tuple[np.ndarray, str, dict]:
    frame, status = get_session().get_frame()
    return frame, status, gr.update(value=get_session().auto_label())


def handle_canvas_click(evt: gr.SelectData | None) -> Tuple[np.ndarray, str, dict]:
    if evt is not None:
        coords = evt.index if isinstance(evt.index, (tuple, list)) else evt.value
        if coords:
            get_session().click((coords[0], coords[1]))
    return refresh_view()


def handle_count_change(text: str) -> str:
    get_session().command("count", text)
    return get_session().count_text()


def handle_start(text: str) -> Tuple[np.ndarray, str, dict, str]:
    get_session().command("start", text)
    frame, status, auto = refresh_view()
    return frame, status, auto, get_session().count_text()


def handle_auto_toggle() -> Tuple[np.ndarray, str, dict]:
    get_session().command("auto")
    return refresh_view()


def handle_close_dialog() -> Tuple[np.ndarray, str, dict]:
    get_session().command("close")
    return refresh_view()


with gr.Blocks(title="Points Game (Gradio)") as demo:
    gr.Markdown(
        """
        ### 🎯 Points Game
        - Click the points in numerical order before they fade away
        - Set how many points to play with, then press **Start / Restart**
        - **Auto Play** clicks the next point for you every second
        """
    )

    with gr.Row():
        game_image = gr.Image(
            label="Live View",
            type="numpy",
            height=pointsgame.HEIGHT,
            width=pointsgame.WIDTH,
        )
        with gr.Column():
            status_md = gr.Markdown("Loading...")
            count_box = gr.Textbox(label="Points", value=Config.DEFAULT_COUNT)
            start_button = gr.Button("Start / Restart", variant="primary")
            auto_button = gr.Button("Auto Play ON", variant="secondary")
            close_button = gr.Button("Close Dialog")

    refresh_timer = gr.Timer(Config.REFRESH_INTERVAL)

    demo.load(fn=startup, inputs=None, outputs=[game_image, status_md])
    refresh_timer.tick(fn=refresh_view, inputs=None, outputs=[game_image, status_md, auto_button])

    game_image.select(
        fn=handle_canvas_click,
        inputs=None,
        outputs=[game_image, status_md, auto_button],
    )
    count_box.submit(fn=handle_count_change, inputs=[count_box], outputs=[count_box])
    start_button.click(
        fn=handle_start,
        inputs=[count_box],
        outputs=[game_image, status_md, auto_button, count_box],
    )
    auto_button.click(fn=handle_auto_toggle, inputs=None, outputs=[game_image, status_md, auto_button])
    close_button.click(fn=handle_close_dialog, inputs=None, outputs=[game_image, status_md, auto_button])


def main() -> None:
    logging.basicConfig(
        level=Config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    get_session()
    demo.queue().launch(
        server_name="0.0.0.0",
        server_port=Config.PORT,
    )


if __name__ == "__main__":
    main()
