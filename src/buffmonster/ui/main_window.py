"""Main window: the tagged editor plus a side panel of tags and ranges."""

from __future__ import annotations

import logging

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QCheckBox,
    QColorDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QPushButton,
    QSplitter,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from ..core.colors import readable_text_color
from ..core.commands import ApplyTag, CreateTag, DeleteRange, DeleteTag, SetColor, UpdateSettings
from ..core.document import APP_NAME
from ..core.snapshot import RenderSnapshot, TaggedSection
from ..services.session import DocumentSession
from .editor_widget import TaggedTextEdit
from .theme import apply_color_scheme

__all__ = ["MainWindow", "sections_markdown"]

LOGGER = logging.getLogger(__name__)
_RANGE_ROLE = Qt.ItemDataRole.UserRole


def sections_markdown(sections: list[TaggedSection]) -> str:
    """Render each tagged section as a bold tag heading followed by its text."""

    blocks = [f"**{section.tag_name}**\n\n{section.text}" for section in sections]
    return "\n\n---\n\n".join(blocks)


class MainWindow(QMainWindow):
    """Wires user actions on the tag panel to session commands."""

    def __init__(self, session: DocumentSession) -> None:
        super().__init__()
        self._session = session
        self.setWindowTitle(APP_NAME)
        self.resize(1000, 700)

        self.editor = TaggedTextEdit(session, self)

        self.tag_input = QLineEdit(self)
        self.tag_input.setPlaceholderText("New tag name")
        self.add_button = QPushButton("Add tag", self)
        self.add_assign_button = QPushButton("Add and assign", self)
        self.tag_list = QListWidget(self)
        self.assign_button = QPushButton("Assign to selection", self)
        self.color_button = QPushButton("Color…", self)
        self.delete_tag_button = QPushButton("Delete tag", self)
        self.range_list = QListWidget(self)
        self.delete_range_button = QPushButton("Delete range", self)
        self.dark_mode_box = QCheckBox("Dark mode", self)
        self.markdown_box = QCheckBox("Markdown view", self)
        self.background_box = QCheckBox("Mark as background", self)
        self.markdown_view = QTextBrowser(self)
        self.markdown_view.setOpenExternalLinks(True)
        self.markdown_view.setVisible(False)
        self._dark_applied: bool | None = None

        self._build_layout()
        self._connect_signals()
        session.add_snapshot_listener(self.render_snapshot)
        self.render_snapshot(session.snapshot())

    def _build_layout(self) -> None:
        panel = QWidget(self)
        layout = QVBoxLayout(panel)
        layout.addWidget(QLabel("Tags", panel))
        add_row = QHBoxLayout()
        add_row.addWidget(self.tag_input)
        add_row.addWidget(self.add_button)
        add_row.addWidget(self.add_assign_button)
        layout.addLayout(add_row)
        layout.addWidget(self.tag_list)
        tag_row = QHBoxLayout()
        tag_row.addWidget(self.assign_button)
        tag_row.addWidget(self.color_button)
        tag_row.addWidget(self.delete_tag_button)
        layout.addLayout(tag_row)
        layout.addWidget(QLabel("Tagged ranges:", panel))
        layout.addWidget(self.range_list)
        layout.addWidget(self.delete_range_button)
        layout.addWidget(self.dark_mode_box)
        layout.addWidget(self.markdown_box)
        layout.addWidget(self.background_box)

        splitter = QSplitter(self)
        splitter.addWidget(self.editor)
        splitter.addWidget(self.markdown_view)
        splitter.addWidget(panel)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 2)
        splitter.setStretchFactor(2, 1)
        self.setCentralWidget(splitter)

    def _connect_signals(self) -> None:
        self.add_button.clicked.connect(self._handle_add_tag)
        self.tag_input.returnPressed.connect(self._handle_add_tag)
        self.add_assign_button.clicked.connect(self._handle_add_and_assign)
        self.assign_button.clicked.connect(self._handle_assign)
        self.color_button.clicked.connect(self._handle_pick_color)
        self.delete_tag_button.clicked.connect(self._handle_delete_tag)
        self.delete_range_button.clicked.connect(self._handle_delete_range)
        self.dark_mode_box.toggled.connect(
            lambda checked: self._session.dispatch(UpdateSettings(dark_mode=checked))
        )
        self.background_box.toggled.connect(
            lambda checked: self._session.dispatch(UpdateSettings(mark_as_background=checked))
        )
        self.markdown_box.toggled.connect(
            lambda checked: self._session.dispatch(UpdateSettings(markdown_view_enabled=checked))
        )

    def render_snapshot(self, snapshot: RenderSnapshot) -> None:
        self._render_tags(snapshot)
        self._render_ranges(snapshot)
        for box, checked in (
            (self.dark_mode_box, snapshot.settings.dark_mode),
            (self.background_box, snapshot.settings.mark_as_background),
            (self.markdown_box, snapshot.settings.markdown_view_enabled),
        ):
            if box.isChecked() != checked:
                box.blockSignals(True)
                box.setChecked(checked)
                box.blockSignals(False)
        self._render_markdown(snapshot)
        if self._dark_applied != snapshot.settings.dark_mode:
            if apply_color_scheme(snapshot.settings.dark_mode):
                self._dark_applied = snapshot.settings.dark_mode

    def _render_tags(self, snapshot: RenderSnapshot) -> None:
        current = self.selected_tag()
        self.tag_list.clear()
        for name, color in snapshot.colors.items():
            item = QListWidgetItem(name)
            item.setBackground(QColor(*color))
            item.setForeground(QColor(*readable_text_color(color)))
            self.tag_list.addItem(item)
            if name == current:
                self.tag_list.setCurrentItem(item)

    def _render_ranges(self, snapshot: RenderSnapshot) -> None:
        self.range_list.clear()
        for tagged in snapshot.ranges:
            item = QListWidgetItem(f"{tagged.tag_name}: {snapshot.preview(tagged)}")
            item.setData(_RANGE_ROLE, tagged)
            color = snapshot.color_for(tagged)
            if color is not None:
                item.setForeground(QColor(*color))
            self.range_list.addItem(item)

    def _render_markdown(self, snapshot: RenderSnapshot) -> None:
        enabled = snapshot.settings.markdown_view_enabled
        self.markdown_view.setVisible(enabled)
        if enabled:
            self.markdown_view.setMarkdown(sections_markdown(snapshot.sections()))

    def selected_tag(self) -> str | None:
        item = self.tag_list.currentItem()
        return item.text() if item is not None else None

    # Actions ----------------------------------------------------------
    def _handle_add_tag(self) -> str:
        name = self.tag_input.text().strip()
        self.tag_input.clear()
        if name:
            self._session.dispatch(CreateTag(name))
        return name

    def _handle_add_and_assign(self) -> None:
        name = self._handle_add_tag()
        if name:
            self._session.dispatch(ApplyTag(name))

    def _handle_assign(self) -> None:
        name = self.selected_tag()
        if name is not None:
            self._session.dispatch(ApplyTag(name))

    def _handle_pick_color(self) -> None:
        name = self.selected_tag()
        if name is None:
            return
        current = self._session.snapshot().colors.get(name, (255, 255, 255))
        chosen = QColorDialog.getColor(QColor(*current), self, f"Color for {name}")
        if chosen.isValid():
            self._session.dispatch(SetColor(name, (chosen.red(), chosen.green(), chosen.blue())))

    def _handle_delete_tag(self) -> None:
        name = self.selected_tag()
        if name is not None:
            self._session.dispatch(DeleteTag(name))

    def _handle_delete_range(self) -> None:
        item = self.range_list.currentItem()
        if item is None:
            return
        self._session.dispatch(DeleteRange(item.data(_RANGE_ROLE)))
