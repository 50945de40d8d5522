"""Run orchestration primitives: progress channel and in-flight registry.

The service module is imported directly (orchestrator.service) because it
depends on the pipeline, which itself reports through orchestrator.progress.
"""

from .inflight import InFlightRegistry, InFlightRun
from .progress import STAGE_CHECKPOINTS, InMemoryProgressStore, ProgressReporter

__all__ = [
    "InFlightRegistry",
    "InFlightRun",
    "InMemoryProgressStore",
    "ProgressReporter",
    "STAGE_CHECKPOINTS",
]
