"""Domain entity for the per-record enrichment state machine."""

from enum import Enum


class EnrichmentStatus(str, Enum):
    """Lifecycle states of an insight request for one record.

    idle -> analyzing -> enriched | failed; any new request goes back to
    analyzing, so a failure is never sticky.
    """

    IDLE = "idle"
    ANALYZING = "analyzing"
    ENRICHED = "enriched"
    FAILED = "failed"
