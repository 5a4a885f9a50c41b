"""Shared pytest fixtures."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

# Run Qt headless when no display is available.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from buffmonster.core.document import Document
from buffmonster.core.range_set import RangeSet, TaggedRange
from buffmonster.core.ranges import Interval
from buffmonster.core.tags import TagRegistry
from buffmonster.services.store import DocumentStore


@pytest.fixture
def hello_document() -> Document:
    """``"hello world"`` with tag ``x`` on ``hello`` and tag ``y`` on ``world``."""

    return Document(
        buffer="hello world",
        tags=TagRegistry({"x": (200, 40, 40), "y": (40, 40, 200)}),
        ranges=RangeSet(
            [
                TaggedRange("x", Interval(0, 5)),
                TaggedRange("y", Interval(6, 11)),
            ]
        ),
    )


@pytest.fixture
def store(tmp_path: Path) -> DocumentStore:
    return DocumentStore(
        tmp_path / "state.json",
        tmp_path / "backup.txt",
        max_attempts=1,
        retry_min_seconds=0,
    )
