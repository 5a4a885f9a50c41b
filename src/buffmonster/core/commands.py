"""Closed set of document commands and the reducer that applies them.

Every input (keystrokes, tag assignment, panel buttons) reaches the document
as one of the command dataclasses below. :func:`reduce` never mutates its
argument: it returns a new :class:`~buffmonster.core.document.Document` and
whether the change must be persisted, leaving side effects to the caller.

Example::

    result = reduce(document, InsertText(position=0, text="x"))
    if result.needs_save:
        store.save(result.document)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict

from .colors import ColorTuple
from .document import Document
from .range_set import TaggedRange
from .ranges import Interval
from .reconciler import EditEvent, reconcile

__all__ = [
    "ApplyTag",
    "Command",
    "CreateTag",
    "DeleteRange",
    "DeleteTag",
    "DeleteText",
    "InsertText",
    "ReduceResult",
    "SetColor",
    "SetSelection",
    "TextEdited",
    "UpdateSettings",
    "reduce",
]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Command:
    """Base class for all document commands."""


@dataclass(slots=True, frozen=True)
class InsertText(Command):
    """Type or paste ``text`` at ``position``.

    When ``replacing`` is a non-empty interval the text overwrites it and
    ``position`` is ignored.
    """

    position: int
    text: str
    replacing: Interval | None = None


@dataclass(slots=True, frozen=True)
class DeleteText(Command):
    """Remove ``[start, end)``.

    ``from_selection`` marks the deletion of a selected span (as opposed to a
    backspace/delete keystroke at a bare caret).
    """

    start: int
    end: int
    from_selection: bool = False


@dataclass(slots=True, frozen=True)
class TextEdited(Command):
    """An edit the input widget already applied; ``buffer`` is the new text."""

    event: EditEvent
    buffer: str


@dataclass(slots=True, frozen=True)
class SetSelection(Command):
    anchor: int
    position: int


@dataclass(slots=True, frozen=True)
class ApplyTag(Command):
    """Assign ``tag_name`` to ``selection`` (the current selection if omitted)."""

    tag_name: str
    selection: Interval | None = None


@dataclass(slots=True, frozen=True)
class DeleteRange(Command):
    tagged_range: TaggedRange


@dataclass(slots=True, frozen=True)
class CreateTag(Command):
    name: str


@dataclass(slots=True, frozen=True)
class DeleteTag(Command):
    name: str


@dataclass(slots=True, frozen=True)
class SetColor(Command):
    name: str
    color: ColorTuple


@dataclass(slots=True, frozen=True)
class UpdateSettings(Command):
    dark_mode: bool | None = None
    markdown_view_enabled: bool | None = None
    mark_as_background: bool | None = None


@dataclass(slots=True, frozen=True)
class ReduceResult:
    """Outcome of :func:`reduce`; ``needs_save`` is ``False`` for no-ops."""

    document: Document
    needs_save: bool


def reduce(document: Document, command: Command) -> ReduceResult:
    """Apply ``command`` to a copy of ``document``."""

    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"Unsupported command: {type(command).__name__}")
    updated = document.copy()
    needs_save = handler(updated, command)
    return ReduceResult(document=updated, needs_save=needs_save)


def _apply_edit(document: Document, event: EditEvent, new_buffer: str) -> bool:
    document.update_text(new_buffer)
    document.ranges.replace_all(reconcile(document.ranges, event))
    caret = event.caret + max(0, event.inserted)
    document.selection = Interval(caret, caret)
    document.clean_invalid_ranges()
    LOGGER.debug(
        "Reconciled edit caret=%d delta=%d selection_len=%d (%d range(s))",
        event.caret,
        event.delta,
        event.selection_len,
        len(document.ranges),
    )
    return True


def _clamp_offset(value: int, length: int) -> int:
    return max(0, min(int(value), length))


def _insert_text(document: Document, command: InsertText) -> bool:
    length = document.buffer_length
    replacing = command.replacing.clamp(upper=length) if command.replacing is not None else None
    if replacing is not None and not replacing.is_empty:
        event = EditEvent.selection_replace(replacing.start, replacing.end, len(command.text))
        new_buffer = document.buffer[: replacing.start] + command.text + document.buffer[replacing.end :]
        return _apply_edit(document, event, new_buffer)
    if not command.text:
        return False
    position = _clamp_offset(command.position, length)
    event = EditEvent.insertion(position, len(command.text))
    new_buffer = document.buffer[:position] + command.text + document.buffer[position:]
    return _apply_edit(document, event, new_buffer)


def _delete_text(document: Document, command: DeleteText) -> bool:
    length = document.buffer_length
    start = _clamp_offset(min(command.start, command.end), length)
    end = _clamp_offset(max(command.start, command.end), length)
    if start == end:
        return False
    if command.from_selection:
        event = EditEvent.selection_delete(start, end)
    else:
        event = EditEvent.deletion(start, end - start)
    new_buffer = document.buffer[:start] + document.buffer[end:]
    return _apply_edit(document, event, new_buffer)


def _text_edited(document: Document, command: TextEdited) -> bool:
    return _apply_edit(document, command.event, command.buffer)


def _set_selection(document: Document, command: SetSelection) -> bool:
    selection = Interval.selection(command.anchor, command.position)
    document.selection = selection.clamp(upper=document.buffer_length)
    return False


def _apply_tag(document: Document, command: ApplyTag) -> bool:
    selection = command.selection if command.selection is not None else document.selection
    selection = selection.clamp(upper=document.buffer_length)
    if command.tag_name not in document.tags:
        LOGGER.debug("Ignoring unregistered tag %r", command.tag_name)
        return False
    return document.ranges.apply_tag(command.tag_name, selection)


def _delete_range(document: Document, command: DeleteRange) -> bool:
    return document.ranges.delete_range(command.tagged_range)


def _create_tag(document: Document, command: CreateTag) -> bool:
    return document.tags.create_tag(command.name)


def _delete_tag(document: Document, command: DeleteTag) -> bool:
    return document.tags.delete_tag(command.name, ranges=document.ranges)


def _set_color(document: Document, command: SetColor) -> bool:
    return document.tags.set_color(command.name, command.color)


def _update_settings(document: Document, command: UpdateSettings) -> bool:
    updated = document.settings.updated(
        dark_mode=command.dark_mode,
        markdown_view_enabled=command.markdown_view_enabled,
        mark_as_background=command.mark_as_background,
    )
    if updated == document.settings:
        return False
    document.settings = updated
    return True


_HANDLERS: Dict[type, Callable[[Document, Any], bool]] = {
    InsertText: _insert_text,
    DeleteText: _delete_text,
    TextEdited: _text_edited,
    SetSelection: _set_selection,
    ApplyTag: _apply_tag,
    DeleteRange: _delete_range,
    CreateTag: _create_tag,
    DeleteTag: _delete_tag,
    SetColor: _set_color,
    UpdateSettings: _update_settings,
}
