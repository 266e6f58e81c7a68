"""
Turnabout Access - Screen reader announcements for a running game.

Architecture:
    StateProbe → Trackers → SpeechSink → SpeechCapability

Public API (stable):
    Dispatcher      - Owns the trackers. Call .tick() every frame, .handle() on key press.
    Command         - repeat, announce_state, navigate_next/previous, announce_hint, list_all
    EngineConfig    - Engine configuration (code, YAML or JSON)
    SpeechSink      - Formats, deduplicates and speaks announcements
    Category        - Announcement category
    AttributeProbe  - StateProbe over live host objects
    MappingProbe    - StateProbe over a dictionary snapshot

Modules:
    probe           - Found / NOT_AVAILABLE reads against host state
    trackers        - Dot puzzle, vase puzzle and 3D evidence trackers
    narration       - Opening narration, line by line
    text            - Packed narration decoding and line segmentation
    speech          - Sink, text cleanup and platform speech adapters
    localization    - Message templates with English fallback
    monitoring      - Structured logging and the diagnostic log
    testing         - RecordingSpeech mock capability

Example:
    from turnabout_access import AttributeProbe, Dispatcher, EngineConfig

    dispatcher = Dispatcher.from_config(AttributeProbe(game), EngineConfig(speech_mode="nvda"))

    def on_update():
        dispatcher.tick()

    def on_key(command):
        dispatcher.handle(command)   # "navigate_next", "announce_hint", ...

    # Configuration from a file
    config = EngineConfig.from_file("turnabout.yaml")

    # Tests without a host or a screen reader
    from turnabout_access.testing import MappingProbe, RecordingSpeech
    speech = RecordingSpeech()
    dispatcher = Dispatcher.from_config(MappingProbe({"vase_puzzle.proc_id": 1}), capability=speech)
    dispatcher.tick()
    print(speech.spoken)
"""

__version__ = "0.1.0"

from turnabout_access.config import EngineConfig, HintBands
from turnabout_access.dispatcher import Command, Dispatcher
from turnabout_access.errors import (
    AccessError,
    ConfigError,
    ProbeError,
    ProjectionError,
    SpeechUnavailableError,
)
from turnabout_access.localization import MessageCatalog
from turnabout_access.narration import NarrationTracker
from turnabout_access.probe import (
    NOT_AVAILABLE,
    AttributeProbe,
    Found,
    MappingProbe,
    StateProbe,
)
from turnabout_access.speech import Category, SpeechSink

__all__ = [
    "__version__",
    "Dispatcher",
    "Command",
    "EngineConfig",
    "HintBands",
    "MessageCatalog",
    "NarrationTracker",
    "SpeechSink",
    "Category",
    "StateProbe",
    "AttributeProbe",
    "MappingProbe",
    "Found",
    "NOT_AVAILABLE",
    "AccessError",
    "ConfigError",
    "ProbeError",
    "ProjectionError",
    "SpeechUnavailableError",
]
