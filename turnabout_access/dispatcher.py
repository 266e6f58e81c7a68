"""
Dispatcher - Owns the trackers and routes ticks and user commands.

The host calls tick() once per frame and handle() whenever the user
presses a mapped key, both on the same thread. Every tracker runs its
own detection each tick; the dispatcher only decides which active mode
receives commands. Nothing raised inside the engine reaches the host.

Example:
    probe = AttributeProbe(game_state)
    dispatcher = Dispatcher.from_config(probe, EngineConfig.from_file("turnabout.yaml"))

    # every frame
    dispatcher.tick()

    # on key press
    dispatcher.handle("navigate_next")
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Union

from turnabout_access.config import EngineConfig
from turnabout_access.localization import MessageCatalog
from turnabout_access.monitoring.logging import DiagnosticLog, configure_logging, get_logger
from turnabout_access.narration import NarrationTracker
from turnabout_access.probe.base import StateProbe
from turnabout_access.speech.capabilities import SpeechCapability, detect_capability
from turnabout_access.speech.sink import Category, SpeechSink
from turnabout_access.trackers.base import ModeTracker, PollingTracker
from turnabout_access.trackers.dot_puzzle import DotPuzzleTracker
from turnabout_access.trackers.hotspot_exam import HotspotExamTracker
from turnabout_access.trackers.rotate_puzzle import RotatePuzzleTracker

logger = logging.getLogger(__name__)


class Command(Enum):
    """Discrete user commands."""
    REPEAT = "repeat"
    ANNOUNCE_STATE = "announce_state"
    NAVIGATE_NEXT = "navigate_next"
    NAVIGATE_PREVIOUS = "navigate_previous"
    ANNOUNCE_HINT = "announce_hint"
    LIST_ALL = "list_all"


class Dispatcher:
    """Tick and command router for the announcement engine."""

    def __init__(
        self,
        probe: StateProbe,
        sink: SpeechSink,
        config: Optional[EngineConfig] = None,
        catalog: Optional[MessageCatalog] = None,
        diagnostics: Optional[DiagnosticLog] = None,
        trackers: Optional[list[ModeTracker]] = None,
        narration: Optional[PollingTracker] = None,
    ) -> None:
        self.probe = probe
        self.sink = sink
        self.config = config or EngineConfig()
        self.catalog = catalog or MessageCatalog(self.config.language)
        self.diagnostics = diagnostics

        shared = dict(
            catalog=self.catalog, config=self.config, diagnostics=self.diagnostics,
        )
        # Priority order when more than one mode reports active
        self.trackers: list[ModeTracker] = trackers if trackers is not None else [
            DotPuzzleTracker(probe, sink, **shared),
            RotatePuzzleTracker(probe, sink, **shared),
            HotspotExamTracker(probe, sink, **shared),
        ]
        self.narration = narration if narration is not None else NarrationTracker(
            probe, sink, **shared
        )
        self._active: Optional[ModeTracker] = None
        self._events = get_logger().bind(component="dispatcher")

    @classmethod
    def from_config(
        cls,
        probe: StateProbe,
        config: Optional[EngineConfig] = None,
        capability: Optional[SpeechCapability] = None,
    ) -> "Dispatcher":
        """Build a dispatcher with logging, diagnostics and speech set up.

        Args:
            probe: Host state probe
            config: Engine configuration (defaults if omitted)
            capability: Speech adapter; detected from config.speech_mode if omitted

        Returns:
            A ready dispatcher
        """
        config = config or EngineConfig()
        structured = configure_logging(config.log_level, json_format=config.log_json)
        diagnostics = DiagnosticLog(config.diagnostic_capacity, logger=structured)
        if capability is None:
            capability = detect_capability(config.speech_mode)
        logger.info("Speech capability: %s", capability.name)

        sink = SpeechSink(
            capability,
            duplicate_window_s=config.duplicate_window_s,
            diagnostics=diagnostics,
        )
        return cls(
            probe,
            sink,
            config=config,
            catalog=MessageCatalog(config.language),
            diagnostics=diagnostics,
        )

    @property
    def active_tracker(self) -> Optional[ModeTracker]:
        """The mode tracker that currently receives commands."""
        return self._active

    def tick(self) -> Optional[ModeTracker]:
        """Poll every tracker once and select the active mode.

        Returns:
            The active mode tracker, or None
        """
        for tracker in [*self.trackers, self.narration]:
            try:
                tracker.poll()
            except Exception as e:
                self._record(tracker.name, e)

        self._select()
        return self._active

    def _select(self) -> None:
        active = next((t for t in self.trackers if t.is_active), None)
        if active is not self._active:
            if self._active is not None:
                self._events.tracker_transition(self._active.name, False)
            if active is not None:
                self._events.tracker_transition(active.name, True)
            self._active = active

    def handle(self, command: Union[Command, str]) -> bool:
        """Run a user command.

        Args:
            command: Command or its string value

        Returns:
            True if the command produced its intended effect
        """
        if not isinstance(command, Command):
            try:
                command = Command(command)
            except ValueError:
                logger.warning("Unknown command: %r", command)
                return False

        try:
            return self._handle(command)
        except Exception as e:
            self._record(f"command.{command.value}", e)
            return False

    def _handle(self, command: Command) -> bool:
        if command == Command.REPEAT:
            return self.sink.repeat_last()

        self._select()
        tracker = self._active
        if tracker is None:
            if command == Command.ANNOUNCE_STATE:
                self.sink.announce(self.catalog.get("system.no_mode"), Category.SYSTEM_MESSAGE)
            else:
                self.sink.announce(
                    self.catalog.get("system.nothing_to_navigate"), Category.SYSTEM_MESSAGE
                )
            return False

        if command == Command.ANNOUNCE_STATE:
            return tracker.announce_state()
        if command == Command.NAVIGATE_NEXT:
            return tracker.navigate_next()
        if command == Command.NAVIGATE_PREVIOUS:
            return tracker.navigate_previous()
        if command == Command.ANNOUNCE_HINT:
            return tracker.announce_hint()
        return tracker.list_all()

    def _record(self, source: str, error: Exception) -> None:
        logger.error("Error in %s: %s", source, error)
        if self.diagnostics is not None:
            self.diagnostics.record(source, error)
