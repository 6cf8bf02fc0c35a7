"""
Shared fixtures for the analysis pipeline tests.

FakeClient stands in for AnalysisClient: each section, the whole-document
call and the combining call pop scripted outcomes from their own queue,
falling back to a deterministic default text once the queue is empty.
"""

import random
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from boothdocs.analysis.retry import RetryController


class FakeClient:
    """Scripted AnalysisClient replacement that records every call."""

    def __init__(self, sections=None, synthesis=None, document=None):
        self.sections = {number: list(outcomes) for number, outcomes in (sections or {}).items()}
        self.synthesis = list(synthesis or [])
        self.document = list(document or [])
        self.calls = []
        self.synthesis_inputs = []
        self.section_texts = {}

    def analyze_chunk(self, chunk, kind, question=None, prior_context=None, total_chunks=1):
        if prior_context is not None:
            self.calls.append(("synthesis", None))
            self.synthesis_inputs.append(prior_context)
            return self._next(self.synthesis, f"Final {kind.value} result")

        if total_chunks <= 1:
            self.calls.append(("document", 1))
            return self._next(self.document, f"Direct {kind.value} result")

        self.calls.append(("section", chunk.number))
        self.section_texts[chunk.number] = chunk.text
        return self._next(self.sections.setdefault(chunk.number, []), f"Items from section {chunk.number}")

    def synthesize(self, combined, kind, question=None):
        return self.analyze_chunk(None, kind, question=question, prior_context=combined)

    def section_calls(self, number=None):
        """Section numbers called, or the call count for one section."""
        numbers = [n for label, n in self.calls if label == "section"]
        if number is None:
            return numbers
        return numbers.count(number)

    def _next(self, queue, default):
        return queue.pop(0) if queue else default


def paragraph_document(paragraphs: int, width: int = 100) -> str:
    """Document of equal paragraphs, each `width` chars including its blank-line break."""
    body = ("Exhibitors must follow all show rules. " * ((width // 39) + 1))[: width - 3] + "."
    return "".join(body + "\n\n" for _ in range(paragraphs))


@pytest.fixture
def make_client():
    """Factory for scripted FakeClients."""
    return FakeClient


@pytest.fixture
def make_document():
    return paragraph_document


@pytest.fixture
def sleeps():
    """Delays requested by the retry controller, in order."""
    return []


@pytest.fixture
def retry(sleeps):
    """RetryController that records delays instead of sleeping."""
    return RetryController(
        max_attempts=3,
        base_delay=1.0,
        max_delay=30.0,
        jitter=0.25,
        sleep=sleeps.append,
        rng=random.Random(7),
    )
