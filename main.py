# main.py
from __future__ import annotations

import logging
import random

from kivy.app import App
from kivy.core.window import Window
from kivy.utils import platform

from services.config import AppConfig
from services.engine import PetEngine
from services.kivy_clock import KivyScheduler
from services.notifications import Notification
from services.persistence import Persistence
from ui.components import PetScreenManager, show_message

logger = logging.getLogger(__name__)


class PixelPalApp(App):
    title = "Pixel Pal"

    def __init__(self, app_config: AppConfig | None = None, **kwargs):
        super().__init__(**kwargs)
        self.app_config = app_config or AppConfig.from_env()
        self.engine: PetEngine | None = None
        self.sm: PetScreenManager | None = None

    # ---------- App lifecycle ----------
    def build(self):
        if platform not in ("android", "ios"):
            Window.size = (420, 780)
        persistence = Persistence(self.app_config.data_dir or self.user_data_dir)
        logger.info("saving to %s", persistence.base_dir)
        rng = random.Random(self.app_config.seed)
        self.engine = PetEngine.from_persistence(
            persistence, KivyScheduler(self.app_config.time_scale), rng=rng
        )
        self.sm = PetScreenManager()
        self.engine.subscribe(self._refresh)
        self.engine.on_notification(self._on_notification)
        self._refresh()
        return self.sm

    def on_pause(self):
        self._flush()
        return True

    def on_stop(self):
        if self.engine:
            self.engine.shutdown()

    # ---------- Observer ----------
    def _refresh(self) -> None:
        if self.sm and self.engine:
            self.sm.refresh(self.engine.snapshot())

    def _on_notification(self, note: Notification) -> None:
        if note.kind == "evolved":
            show_message("Your pet evolved!", "You're a great caretaker!", "Yay!")
        elif note.kind == "secret_found":
            show_message(
                "You discovered the secret ritual!",
                "Permanent +10 boost to all stats!",
                "Awesome!",
            )

    def _flush(self) -> None:
        if self.engine and self.engine.store.persistence:
            self.engine.store.persistence.save_stats(self.engine.store.get())


if __name__ == "__main__":
    settings = AppConfig.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )
    PixelPalApp(app_config=settings).run()
