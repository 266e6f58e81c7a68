"""
Host state probing.

Modules:
    base       - StateProbe, Found / NOT_AVAILABLE result types
    attribute  - AttributeProbe over a live object graph
    mapping    - MappingProbe over a dictionary snapshot
"""

from turnabout_access.probe.base import (
    Found,
    NotAvailable,
    NOT_AVAILABLE,
    ProbeResult,
    StateProbe,
    lookup,
    read_field,
)
from turnabout_access.probe.attribute import AttributeProbe
from turnabout_access.probe.mapping import MappingProbe

__all__ = [
    "Found",
    "NotAvailable",
    "NOT_AVAILABLE",
    "ProbeResult",
    "StateProbe",
    "lookup",
    "read_field",
    "AttributeProbe",
    "MappingProbe",
]
