"""
Tests for ProgressEmitter and ProgressEvent.
"""

from queue import Queue

import pytest

from boothdocs.analysis.progress import COMBINING_STAGE, PREPARING_STAGE, ProgressEmitter, section_stage
from boothdocs.analysis.types import ProgressEvent


class TestProgressEmitter:
    """Delivery to callables and queues."""

    def test_callback_receives_events(self):
        received = []
        emitter = ProgressEmitter(received.append)

        emitter.emit(0, 3, PREPARING_STAGE)
        emitter.emit(1, 3, section_stage(1, 3))

        assert received == [
            ProgressEvent(0, 3, "Preparing analysis"),
            ProgressEvent(1, 3, "Analyzing section 1 of 3"),
        ]

    def test_queue_receives_tagged_events(self):
        queue = Queue()
        emitter = ProgressEmitter(queue)

        emitter.emit(3, 3, COMBINING_STAGE)

        assert queue.get_nowait() == ("progress", ProgressEvent(3, 3, "Combining results"))
        assert queue.empty()

    def test_no_sink_is_a_no_op(self):
        emitter = ProgressEmitter()

        assert not emitter.enabled
        assert emitter.emit(1, 2, "anything") is None

    def test_raising_callback_is_ignored(self):
        def broken(event):
            raise RuntimeError("UI closed")

        emitter = ProgressEmitter(broken)

        event = emitter.emit(1, 2, section_stage(1, 2))

        assert event == ProgressEvent(1, 2, "Analyzing section 1 of 2")


class TestProgressEvent:
    """Event range checks."""

    @pytest.mark.parametrize("current,total", [(-1, 3), (4, 3)])
    def test_current_outside_range_rejected(self, current, total):
        with pytest.raises(ValueError):
            ProgressEvent(current, total, "bad")

    def test_boundaries_allowed(self):
        assert ProgressEvent(0, 0, "empty").current == 0
        assert ProgressEvent(5, 5, COMBINING_STAGE).current == 5
