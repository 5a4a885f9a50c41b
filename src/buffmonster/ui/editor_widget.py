"""Plain-text editor that forwards edits to a :class:`DocumentSession`.

Qt reports each document mutation through ``QTextDocument.contentsChange``
as ``(position, removed, added)``. The widget remembers the selection that
was active before the change so it can tell a selection replacement from a
keystroke at a bare caret, and turns every notification into a
:class:`~buffmonster.core.commands.TextEdited` command. Tag colors are painted
with extra selections built from the session's render snapshot.
"""

from __future__ import annotations

import logging
from typing import Any

from PySide6.QtGui import QColor, QFont, QTextCharFormat, QTextCursor
from PySide6.QtWidgets import QPlainTextEdit, QTextEdit, QWidget

from ..core.colors import readable_text_color
from ..core.commands import SetSelection, TextEdited
from ..core.ranges import Interval
from ..core.reconciler import EditEvent
from ..core.snapshot import RenderSnapshot
from ..services.session import DocumentSession

__all__ = ["TaggedTextEdit", "edit_event_from_change"]

LOGGER = logging.getLogger(__name__)


def edit_event_from_change(
    position: int,
    removed: int,
    delta: int,
    selection_before: Interval,
) -> EditEvent:
    """Classify a Qt content change as a caret edit or a selection edit.

    ``delta`` must be the real change in text length; Qt may inflate
    ``removed``/``added`` by the same amount when it rewrites a whole block.
    """

    width = selection_before.length
    if width > 0 and position == selection_before.start and removed >= width:
        return EditEvent(caret=selection_before.start, delta=delta, selection_len=width)
    return EditEvent(caret=position, delta=delta)


class TaggedTextEdit(QPlainTextEdit):
    """Monospace editor bound to one session."""

    def __init__(self, session: DocumentSession, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._session = session
        self._syncing = False
        self._selection_before = Interval(0, 0)
        self._length_before = 0

        font = QFont("monospace")
        font.setStyleHint(QFont.StyleHint.Monospace)
        font.setPointSize(14)
        self.setFont(font)

        self._load_text(session.document.buffer)
        self.document().contentsChange.connect(self._handle_contents_change)
        self.cursorPositionChanged.connect(self._handle_selection_changed)
        self.selectionChanged.connect(self._handle_selection_changed)
        session.add_snapshot_listener(self.render_snapshot)
        self.render_snapshot(session.snapshot())

    @property
    def session(self) -> DocumentSession:
        return self._session

    def selection_interval(self) -> Interval:
        cursor = self.textCursor()
        return Interval(cursor.selectionStart(), cursor.selectionEnd())

    def select_range(self, start: int, end: int) -> None:
        cursor = self.textCursor()
        cursor.setPosition(start)
        cursor.setPosition(end, QTextCursor.MoveMode.KeepAnchor)
        self.setTextCursor(cursor)

    def render_snapshot(self, snapshot: RenderSnapshot) -> None:
        """Paint one extra selection per run of identically colored offsets."""

        selections: list[Any] = []
        length = len(self.toPlainText())
        for start, end, color in snapshot.color_runs():
            if start >= length:
                continue
            cursor = self.textCursor()
            cursor.setPosition(start)
            cursor.setPosition(min(end, length), QTextCursor.MoveMode.KeepAnchor)
            char_format = QTextCharFormat()
            if snapshot.settings.mark_as_background:
                char_format.setBackground(QColor(*color))
                char_format.setForeground(QColor(*readable_text_color(color)))
            else:
                char_format.setForeground(QColor(*color))
            selection = QTextEdit.ExtraSelection()
            selection.cursor = cursor
            selection.format = char_format
            selections.append(selection)
        self.setExtraSelections(selections)

    def _load_text(self, text: str) -> None:
        self._syncing = True
        try:
            self.setPlainText(text)
        finally:
            self._syncing = False
        self._length_before = len(text)

    # Qt callbacks -----------------------------------------------------
    def _handle_contents_change(self, position: int, removed: int, added: int) -> None:
        if self._syncing:
            return
        text = self.toPlainText()
        delta = len(text) - self._length_before
        event = edit_event_from_change(position, removed, delta, self._selection_before)
        LOGGER.debug(
            "contentsChange position=%d removed=%d added=%d -> %s", position, removed, added, event
        )
        caret = event.caret + max(0, event.inserted)
        self._length_before = len(text)
        self._selection_before = Interval(caret, caret)
        self._session.dispatch(TextEdited(event=event, buffer=text))

    def _handle_selection_changed(self) -> None:
        selection = self.selection_interval()
        if selection == self._selection_before:
            return
        self._selection_before = selection
        self._session.dispatch(SetSelection(anchor=selection.start, position=selection.end))
