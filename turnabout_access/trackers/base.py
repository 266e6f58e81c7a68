"""
Mode Trackers - Tick-driven observers of one host sub-mode each.

A tracker polls its detection predicate once per tick. On an
inactive -> active transition it resets its cursor and runs on_enter();
on the reverse it resets again and runs on_exit(). Detection tolerates
missing host fields: anything unreadable means "not active".

ModeTracker adds the navigation cursor and the command surface
(navigate, hint, state, list). Commands issued while the mode is not
active announce the tracker's fixed "not in this mode" message.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional

from turnabout_access.config import EngineConfig
from turnabout_access.localization import MessageCatalog
from turnabout_access.probe.base import StateProbe
from turnabout_access.speech.sink import Category, SpeechSink

logger = logging.getLogger(__name__)


@dataclass
class Cursor:
    """The engine's own navigation position.

    index is -1 until the first navigation of a session. Movement wraps
    in both directions; with total == 0 it is a no-op.
    """
    index: int = -1
    total: int = 0

    def reset(self) -> None:
        self.index = -1

    def clamp(self, total: int) -> None:
        """Adopt a new total, pulling the index back into range."""
        self.total = max(total, 0)
        if self.index >= self.total:
            self.index = self.total - 1

    def next(self) -> Optional[int]:
        if self.total <= 0:
            return None
        self.index = (self.index + 1) % self.total
        return self.index

    def previous(self) -> Optional[int]:
        if self.total <= 0:
            return None
        self.index = self.total - 1 if self.index <= 0 else self.index - 1
        return self.index


class PollingTracker(ABC):
    """Inactive/active state machine driven by poll()."""

    name: str = "tracker"

    def __init__(
        self,
        probe: StateProbe,
        sink: SpeechSink,
        catalog: Optional[MessageCatalog] = None,
        config: Optional[EngineConfig] = None,
        diagnostics: Optional[Any] = None,
    ) -> None:
        self.probe = probe
        self.sink = sink
        self.catalog = catalog or MessageCatalog()
        self.config = config or EngineConfig()
        self.diagnostics = diagnostics
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    @abstractmethod
    def detect(self) -> bool:
        """Mode predicate over host state. Must not write anything."""
        ...

    def on_enter(self) -> None:
        pass

    def on_exit(self) -> None:
        pass

    def on_tick(self) -> None:
        """Per-tick sampling while active."""
        pass

    def poll(self) -> bool:
        """Run detection once and fire transitions. Returns the active state."""
        active = self._sync()
        if active:
            self._guard(self.on_tick, "tick")
        return active

    def _sync(self) -> bool:
        active = self._detect_safely()
        if active and not self._active:
            self._active = True
            logger.debug("%s entered", self.name)
            self._guard(self.on_enter, "enter")
        elif not active and self._active:
            self._active = False
            logger.debug("%s exited", self.name)
            self._guard(self.on_exit, "exit")
        return active

    def _detect_safely(self) -> bool:
        try:
            return bool(self.detect())
        except Exception as e:
            self._record(e, "detect")
            return False

    def _guard(self, fn: Callable[[], Any], stage: str, fallback_key: Optional[str] = None) -> Any:
        try:
            return fn()
        except Exception as e:
            self._record(e, stage)
            if fallback_key:
                self.announce(fallback_key)
            return None

    def _record(self, error: Exception, stage: str) -> None:
        logger.error("Error in %s %s: %s", self.name, stage, error)
        if self.diagnostics is not None:
            self.diagnostics.record(self.name, error, stage=stage)

    def text(self, key: str, *args: Any) -> str:
        return self.catalog.get(key, *args)

    def announce(self, key: str, *args: Any, category: Category = Category.SYSTEM_MESSAGE) -> bool:
        return self.sink.announce(self.catalog.get(key, *args), category)


class ModeTracker(PollingTracker):
    """A tracker with a navigation cursor and user commands.

    Subclasses provide the item count, what a navigation step does, and
    the mode's hint/state/list texts.
    """

    not_in_mode_key: str = "system.no_mode"
    hint_error_key: Optional[str] = None
    state_error_key: Optional[str] = None
    category: Category = Category.INVESTIGATION

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.cursor = Cursor()

    def _sync(self) -> bool:
        was_active = self._active
        active = super()._sync()
        if active != was_active:
            self.cursor.reset()
        return active

    @abstractmethod
    def item_count(self) -> int:
        """Number of navigable items right now."""
        ...

    @abstractmethod
    def on_navigate(self, index: int) -> None:
        """Move to item index and announce it."""
        ...

    @abstractmethod
    def hint(self) -> None:
        ...

    @abstractmethod
    def state(self) -> None:
        ...

    @abstractmethod
    def list_items(self) -> None:
        ...

    def prepare_navigation(self) -> int:
        """Item total for a navigation command."""
        return self.item_count()

    def say(self, text: str, category: Optional[Category] = None) -> bool:
        return self.sink.announce(text, category or self.category)

    def _require_active(self) -> bool:
        if self._sync():
            return True
        self.announce(self.not_in_mode_key)
        return False

    def navigate_next(self) -> bool:
        return self._navigate(forward=True)

    def navigate_previous(self) -> bool:
        return self._navigate(forward=False)

    def _navigate(self, forward: bool) -> bool:
        if not self._require_active():
            return False

        def step() -> bool:
            self.cursor.clamp(self.prepare_navigation())
            index = self.cursor.next() if forward else self.cursor.previous()
            if index is None:
                return False
            if self.config.interrupt_navigation:
                self.sink.stop()
            self.on_navigate(index)
            return True

        return bool(self._guard(step, "navigate"))

    def announce_hint(self) -> bool:
        if not self._require_active():
            return False
        self._guard(self.hint, "hint", self.hint_error_key)
        return True

    def announce_state(self) -> bool:
        if not self._require_active():
            return False
        self._guard(self.state, "state", self.state_error_key)
        return True

    def list_all(self) -> bool:
        if not self._require_active():
            return False
        self._guard(self.list_items, "list", self.hint_error_key)
        return True
