"""
Progress reporting for multi-section analyses.

Turns pipeline steps into (current, total, stage) events delivered to the
caller's sink as they happen. A sink is either:
- a callable taking a ProgressEvent, or
- a queue.Queue, which receives ("progress", ProgressEvent) tuples so a
  UI thread can consume the event stream independently of the result.

The emitter forwards only: no buffering, no retrying, no throttling.
"""

from queue import Queue

from boothdocs.logging_config import debug_log

from .types import ProgressEvent, ProgressSink

PREPARING_STAGE = "Preparing analysis"
COMBINING_STAGE = "Combining results"


def section_stage(number: int, total: int) -> str:
    """Stage label after a section completes."""
    return f"Analyzing section {number} of {total}"


class ProgressEmitter:
    """
    Delivers progress events to an optional sink.

    Example:
        emitter = ProgressEmitter(request.on_progress)
        emitter.emit(0, 5, PREPARING_STAGE)
    """

    def __init__(self, sink: ProgressSink | None = None):
        """
        Args:
            sink: Callable or Queue; None disables reporting
        """
        self.sink = sink

    @property
    def enabled(self) -> bool:
        return self.sink is not None

    def emit(self, current: int, total: int, stage: str) -> ProgressEvent | None:
        """
        Send one progress event.

        A sink that raises is logged and ignored; progress reporting must
        never abort an analysis.

        Args:
            current: Completed steps
            total: Total steps
            stage: Human-readable label

        Returns:
            The event sent, or None when there is no sink
        """
        if self.sink is None:
            return None

        event = ProgressEvent(current=current, total=total, stage=stage)

        if isinstance(self.sink, Queue):
            self.sink.put(("progress", event))
            return event

        try:
            self.sink(event)
        except Exception as e:
            debug_log(f"[ProgressEmitter] Progress callback error: {e}")
        return event
