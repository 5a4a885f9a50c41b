"""Tests for the document command reducer."""

from __future__ import annotations

import pytest

from buffmonster.core.commands import (
    ApplyTag,
    Command,
    CreateTag,
    DeleteRange,
    DeleteTag,
    DeleteText,
    InsertText,
    SetColor,
    SetSelection,
    TextEdited,
    UpdateSettings,
    reduce,
)
from buffmonster.core.document import Document
from buffmonster.core.range_set import TaggedRange
from buffmonster.core.ranges import Interval
from buffmonster.core.reconciler import EditEvent


def _spans(document: Document) -> list[tuple[str, int, int]]:
    return [(tr.tag_name, tr.start, tr.end) for tr in document.ranges]


def test_reduce_does_not_mutate_input(hello_document: Document) -> None:
    result = reduce(hello_document, InsertText(position=0, text="A"))

    assert hello_document.buffer == "hello world"
    assert _spans(hello_document) == [("x", 0, 5), ("y", 6, 11)]
    assert result.document.buffer == "Ahello world"
    assert result.needs_save


def test_insert_at_start_of_range_extends_it(hello_document: Document) -> None:
    result = reduce(hello_document, InsertText(position=0, text="A"))

    assert _spans(result.document) == [("x", 0, 6), ("y", 7, 12)]
    assert result.document.selection == Interval(1, 1)
    assert result.document.version_id == hello_document.version_id + 1


def test_backspace_inside_range_shrinks_it(hello_document: Document) -> None:
    result = reduce(hello_document, DeleteText(4, 5))

    assert result.document.buffer == "hell world"
    assert _spans(result.document) == [("x", 0, 4), ("y", 5, 10)]


def test_deleting_selected_range_text_drops_range(hello_document: Document) -> None:
    result = reduce(hello_document, DeleteText(0, 5, from_selection=True))

    assert result.document.buffer == " world"
    assert _spans(result.document) == [("y", 1, 6)]


def test_typing_over_selection_replaces_range(hello_document: Document) -> None:
    result = reduce(hello_document, InsertText(position=0, text="H", replacing=Interval(0, 5)))

    assert result.document.buffer == "H world"
    assert _spans(result.document) == [("x", 0, 1), ("y", 2, 7)]


def test_text_edited_trusts_widget_buffer(hello_document: Document) -> None:
    event = EditEvent.insertion(11, 1)

    result = reduce(hello_document, TextEdited(event=event, buffer="hello world!"))

    assert result.document.buffer == "hello world!"
    assert _spans(result.document) == [("x", 0, 5), ("y", 6, 11)]


def test_edits_are_validated_against_new_length(hello_document: Document) -> None:
    result = reduce(hello_document, DeleteText(3, 11, from_selection=True))

    assert result.document.buffer == "hel"
    assert _spans(result.document) == [("x", 0, 3)]


def test_empty_edits_are_noops(hello_document: Document) -> None:
    assert not reduce(hello_document, InsertText(position=2, text="")).needs_save
    assert not reduce(hello_document, DeleteText(4, 4)).needs_save


def test_selection_is_ephemeral(hello_document: Document) -> None:
    result = reduce(hello_document, SetSelection(anchor=9, position=2))

    assert result.document.selection == Interval(2, 9)
    assert not result.needs_save


def test_apply_tag_uses_current_selection(hello_document: Document) -> None:
    selected = reduce(hello_document, SetSelection(anchor=3, position=8)).document

    result = reduce(selected, ApplyTag("x"))

    assert result.needs_save
    assert _spans(result.document) == [("x", 0, 8), ("y", 6, 11)]


def test_apply_tag_twice_is_idempotent(hello_document: Document) -> None:
    once = reduce(hello_document, ApplyTag("y", Interval(7, 9)))

    assert not once.needs_save
    assert once.document.ranges == hello_document.ranges


def test_apply_tag_requires_registered_tag(hello_document: Document) -> None:
    result = reduce(hello_document, ApplyTag("ghost", Interval(0, 5)))

    assert not result.needs_save
    assert _spans(result.document) == [("x", 0, 5), ("y", 6, 11)]


def test_delete_tag_removes_ranges_with_unknown_tag(hello_document: Document) -> None:
    hello_document.ranges.apply_tag("ghost", Interval(0, 5))

    result = reduce(hello_document, DeleteTag("ghost"))

    assert result.needs_save
    assert _spans(result.document) == [("x", 0, 5), ("y", 6, 11)]


def test_apply_tag_with_empty_selection_is_noop(hello_document: Document) -> None:
    result = reduce(hello_document, ApplyTag("x"))

    assert not result.needs_save


def test_tag_commands(hello_document: Document) -> None:
    created = reduce(hello_document, CreateTag(" z "))
    recolored = reduce(created.document, SetColor("z", (1, 2, 3)))
    deleted = reduce(recolored.document, DeleteTag("x"))

    assert created.needs_save and recolored.needs_save and deleted.needs_save
    assert deleted.document.tags.names() == ["y", "z"]
    assert deleted.document.tags.get_color("z") == (1, 2, 3)
    assert _spans(deleted.document) == [("y", 6, 11)]


def test_delete_range_command(hello_document: Document) -> None:
    result = reduce(hello_document, DeleteRange(TaggedRange("y", Interval(6, 11))))

    assert _spans(result.document) == [("x", 0, 5)]
    assert not reduce(result.document, DeleteRange(TaggedRange("y", Interval(6, 11)))).needs_save


def test_update_settings_only_saves_on_change(hello_document: Document) -> None:
    changed = reduce(hello_document, UpdateSettings(dark_mode=True))
    unchanged = reduce(changed.document, UpdateSettings(dark_mode=True))

    assert changed.needs_save
    assert changed.document.settings.dark_mode
    assert not changed.document.settings.mark_as_background
    assert not unchanged.needs_save


def test_unknown_command_is_rejected(hello_document: Document) -> None:
    with pytest.raises(TypeError):
        reduce(hello_document, Command())
