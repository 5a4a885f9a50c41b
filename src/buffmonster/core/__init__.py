"""Headless tagging engine: intervals, tags, reconciliation and validation."""

from .commands import (
    ApplyTag,
    Command,
    CreateTag,
    DeleteRange,
    DeleteTag,
    DeleteText,
    InsertText,
    ReduceResult,
    SetColor,
    SetSelection,
    TextEdited,
    UpdateSettings,
    reduce,
)
from .document import Document, DocumentSettings
from .range_set import RangeSet, TaggedRange
from .ranges import Interval
from .reconciler import EditEvent, reconcile
from .snapshot import RenderSnapshot, build_snapshot
from .tags import TagRegistry
from .validator import clean_invalid_ranges

__all__ = [
    "ApplyTag",
    "Command",
    "CreateTag",
    "DeleteRange",
    "DeleteTag",
    "DeleteText",
    "Document",
    "DocumentSettings",
    "EditEvent",
    "InsertText",
    "Interval",
    "RangeSet",
    "ReduceResult",
    "RenderSnapshot",
    "SetColor",
    "SetSelection",
    "TagRegistry",
    "TaggedRange",
    "TextEdited",
    "UpdateSettings",
    "build_snapshot",
    "clean_invalid_ranges",
    "reconcile",
    "reduce",
]
