"""
Testing utilities.

    RecordingSpeech - speech capability that records what was spoken
    MappingProbe    - host state as a dictionary (re-exported)
"""

from turnabout_access.testing.mock import CallRecord, RecordingSpeech
from turnabout_access.probe.mapping import MappingProbe

__all__ = ["CallRecord", "RecordingSpeech", "MappingProbe"]
