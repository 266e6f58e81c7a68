"""
Test Fixtures - Shared infrastructure for engine tests.

Provides:
    - A controllable clock for the dedup window
    - RecordingSpeech wired into a SpeechSink
    - MappingProbe host snapshots for each mode
"""

from __future__ import annotations

import pytest

from turnabout_access.config import EngineConfig
from turnabout_access.localization import MessageCatalog
from turnabout_access.monitoring import DiagnosticLog
from turnabout_access.speech import SpeechSink
from turnabout_access.testing import MappingProbe, RecordingSpeech


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 1.0) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def speech() -> RecordingSpeech:
    return RecordingSpeech()


@pytest.fixture
def diagnostics() -> DiagnosticLog:
    return DiagnosticLog(capacity=50)


@pytest.fixture
def sink(speech: RecordingSpeech, clock: FakeClock, diagnostics: DiagnosticLog) -> SpeechSink:
    return SpeechSink(speech, clock=clock, diagnostics=diagnostics)


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def catalog() -> MessageCatalog:
    return MessageCatalog()


@pytest.fixture
def probe(diagnostics: DiagnosticLog) -> MappingProbe:
    return MappingProbe(diagnostics=diagnostics)


@pytest.fixture
def tracker_kwargs(catalog, config, diagnostics) -> dict:
    return {"catalog": catalog, "config": config, "diagnostics": diagnostics}


# =============================================================================
# Host snapshots
# =============================================================================

def dot_points(count: int) -> list[dict]:
    return [{"lx": 100 + 10 * i, "ly": 200 + 5 * i} for i in range(count)]


@pytest.fixture
def dot_state() -> dict:
    """Dying message puzzle, English, nothing drawn yet."""
    return {
        "global.language": "USA",
        "dying_message.body_active": True,
        "dying_message.proc_state": 2,
        "dying_message.draw_points": dot_points(12),
        "dying_message.lines": [],
        "dying_message.draw_state": "Idle",
        "dying_message.line_start_index": -1,
    }


@pytest.fixture
def vase_state() -> dict:
    """Vase puzzle at step 0, cursor on piece 1."""
    return {
        "vase_puzzle.proc_id": 5,
        "vase_puzzle.puzzle_step": 0,
        "vase_puzzle.icon_cursor": 0,
        "vase_puzzle.pieces": [
            {"angle_id": i % 4, "used": False} for i in range(8)
        ],
    }


@pytest.fixture
def exam_state() -> dict:
    """3D evidence examination with three hotspots and one cut-out."""
    return {
        "science.active": True,
        "science.evidence_manager": {
            "scale_ratio": 1.0,
            "colliders": [
                {"name": "hit_03", "center": (0.5, 0.0, -5.0)},
                {"name": "hit_nuki_01", "center": (0.0, 0.0, -5.0)},
                {"name": "hit_01", "center": (-0.5, 0.5, -5.0)},
                {"name": "hit_02", "center": {"x": 0.0, "y": -0.5, "z": -5.0}},
            ],
        },
        "science.current_evidence_name": "",
        "science.poly_obj_id": 12,
        "science.hit_point_index": -1,
    }
