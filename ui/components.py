# ui/components.py
from __future__ import annotations

from typing import Dict, Optional

from kivy.app import App
from kivy.metrics import dp
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.button import Button
from kivy.uix.floatlayout import FloatLayout
from kivy.uix.label import Label
from kivy.uix.popup import Popup
from kivy.uix.progressbar import ProgressBar
from kivy.uix.screenmanager import Screen, ScreenManager
from kivy.uix.textinput import TextInput
from kivy.uix.togglebutton import ToggleButton

from models.pet import AVATARS
from services.rules import Rules

RULES_TEXT = "\n".join([
    "- Name and choose your pet on first visit (or via Settings).",
    "- Keep Hunger, Energy, and Happiness above 0 or your pet gets sad.",
    "- Stats decrease every 10 seconds. Use Feed, Sleep, and Play to boost them.",
    "- Random events can boost stats every 30 seconds.",
    "- If all stats stay above 80 for 1 minute, your pet evolves!",
    "- Secret: Feed 3x, then Play, then Sleep (in 60s) for a special reward.",
    "- All progress is saved on this device.",
])

MOOD_LABELS = {"sad": "feeling sad", "happy": "glowing with joy", "normal": ""}


def _engine():
    """Return the PetEngine stored on the running App (if present)."""
    return getattr(App.get_running_app(), "engine", None)


def show_message(title: str, text: str, button: str = "OK") -> Popup:
    """Modal with a single dismiss button."""
    body = BoxLayout(orientation="vertical", spacing=dp(8), padding=dp(12))
    lbl = Label(text=text, halign="center", valign="middle")
    lbl.bind(size=lambda inst, val: setattr(inst, "text_size", val))
    body.add_widget(lbl)
    popup = Popup(title=title, content=body, size_hint=(0.85, 0.5), auto_dismiss=False)
    btn = Button(text=button, size_hint_y=None, height=dp(44))
    btn.bind(on_release=lambda *_: popup.dismiss())
    body.add_widget(btn)
    popup.open()
    return popup


# ---------------------------------------------------------------------------
# Screens
# ---------------------------------------------------------------------------
class BaseScreen(Screen):
    def refresh(self, snap) -> None:  # overridden by children
        pass


class OnboardingScreen(BaseScreen):
    """Avatar picker plus name field; submitting starts the simulation."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        root = BoxLayout(orientation="vertical", spacing=dp(10), padding=dp(24))
        root.add_widget(Label(text="Welcome!", font_size="24sp", size_hint_y=None, height=dp(48)))
        root.add_widget(Label(text="Choose your pet:", size_hint_y=None, height=dp(28)))

        row = BoxLayout(spacing=dp(8), size_hint_y=None, height=dp(56))
        self._avatar_buttons: Dict[str, ToggleButton] = {}
        for key in AVATARS:
            btn = ToggleButton(text=key.title(), group="avatar", allow_no_selection=False)
            btn.bind(on_release=lambda inst, k=key: self.on_avatar(k))
            self._avatar_buttons[key] = btn
            row.add_widget(btn)
        root.add_widget(row)

        root.add_widget(Label(text="Name your pet:", size_hint_y=None, height=dp(28)))
        self.name_input = TextInput(multiline=False, size_hint_y=None, height=dp(44), halign="center")
        self.name_input.bind(text=self._limit_name, on_text_validate=lambda *_: self.on_submit())
        root.add_widget(self.name_input)

        start = Button(text="Start Caring", size_hint_y=None, height=dp(48))
        start.bind(on_release=lambda *_: self.on_submit())
        root.add_widget(start)
        root.add_widget(Label())
        self.add_widget(root)

    def _limit_name(self, inst: TextInput, value: str) -> None:
        if len(value) > Rules.NAME_MAX_LEN:
            inst.text = value[: Rules.NAME_MAX_LEN]

    def refresh(self, snap) -> None:
        for key, btn in self._avatar_buttons.items():
            btn.state = "down" if key == snap.avatar else "normal"
        if snap.name and not self.name_input.text:
            self.name_input.text = snap.name

    def on_avatar(self, key: str) -> None:
        eng = _engine()
        if eng:
            eng.select_avatar(key)

    def on_submit(self) -> None:
        eng = _engine()
        if not eng:
            return
        if eng.complete_onboarding(self.name_input.text):
            self.manager.current = "pet"


class PetScreen(BaseScreen):
    """Pet, stat bars and the three care buttons."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        layout = FloatLayout()
        root = BoxLayout(orientation="vertical", spacing=dp(8), padding=dp(16))

        top = BoxLayout(size_hint_y=None, height=dp(40))
        settings = Button(text="Settings", size_hint_x=None, width=dp(96))
        settings.bind(on_release=lambda *_: self.on_settings())
        info = Button(text="Info", size_hint_x=None, width=dp(96))
        info.bind(on_release=lambda *_: show_message("Virtual Pet Rules & Info", RULES_TEXT, "Close"))
        top.add_widget(settings)
        top.add_widget(Label())
        top.add_widget(info)
        root.add_widget(top)

        self.pet_label = Label(font_size="64sp")
        root.add_widget(self.pet_label)
        self.name_label = Label(font_size="22sp", size_hint_y=None, height=dp(36))
        root.add_widget(self.name_label)
        self.mood_label = Label(size_hint_y=None, height=dp(24))
        root.add_widget(self.mood_label)

        self.bars: Dict[str, ProgressBar] = {}
        for stat in ("hunger", "energy", "happiness"):
            root.add_widget(Label(text=stat.title(), size_hint_y=None, height=dp(22), halign="left"))
            bar = ProgressBar(max=Rules.STAT_MAX, size_hint_y=None, height=dp(20))
            self.bars[stat] = bar
            root.add_widget(bar)

        buttons = BoxLayout(spacing=dp(8), size_hint_y=None, height=dp(56))
        self.action_buttons: Dict[str, Button] = {}
        for action in ("feed", "sleep", "play"):
            btn = Button(text=action.title())
            btn.bind(on_release=lambda inst, a=action: self.on_action(a))
            self.action_buttons[action] = btn
            buttons.add_widget(btn)
        root.add_widget(buttons)
        layout.add_widget(root)

        self.toast_label = Label(
            size_hint=(0.9, None), height=dp(40),
            pos_hint={"center_x": 0.5, "top": 0.98}, opacity=0,
        )
        layout.add_widget(self.toast_label)
        self.add_widget(layout)

    def refresh(self, snap) -> None:
        stats = snap.stats
        marker = f" ({snap.animation})" if snap.animation else ""
        party = "🎉 " if snap.confetti else ""
        self.pet_label.text = f"{party}{snap.emoji}{marker}"
        self.pet_label.opacity = 0.5 if snap.mood == "sad" else 1.0
        self.name_label.text = snap.name or "Pet Name"
        self.mood_label.text = MOOD_LABELS.get(snap.mood, "")
        for stat, bar in self.bars.items():
            bar.value = getattr(stats, stat)
        for action, btn in self.action_buttons.items():
            btn.disabled = not snap.can(action)
        self.toast_label.text = snap.toast or ""
        self.toast_label.opacity = 1 if snap.toast else 0

    def on_action(self, action: str) -> None:
        eng = _engine()
        if eng:
            eng.act(action)

    def on_settings(self) -> None:
        eng = _engine()
        if eng:
            eng.begin_onboarding()
        self.manager.current = "onboarding"


class PetScreenManager(ScreenManager):
    """Switches between onboarding and the pet according to the snapshot."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.add_widget(OnboardingScreen(name="onboarding"))
        self.add_widget(PetScreen(name="pet"))

    def refresh(self, snap) -> None:
        wanted = "onboarding" if snap.onboarding_required else "pet"
        if self.current != wanted:
            self.current = wanted
        screen: Optional[BaseScreen] = self.get_screen(self.current)  # type: ignore[assignment]
        if screen is not None:
            screen.refresh(snap)
