"""Main window tests driving the tag panel through qtbot."""

from __future__ import annotations

import pytest
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QPalette
from PySide6.QtWidgets import QApplication, QColorDialog

from buffmonster.core.document import Document
from buffmonster.core.ranges import Interval
from buffmonster.core.snapshot import TaggedSection
from buffmonster.services.session import DocumentSession
from buffmonster.ui.main_window import MainWindow, sections_markdown
from buffmonster.ui.theme import DARK_PALETTE


@pytest.fixture
def window(qtbot, hello_document: Document) -> MainWindow:
    main_window = MainWindow(DocumentSession(document=hello_document))
    qtbot.addWidget(main_window)
    return main_window


def _session(window: MainWindow) -> DocumentSession:
    return window.editor.session


def _select_tag(window: MainWindow, name: str) -> None:
    matches = window.tag_list.findItems(name, Qt.MatchFlag.MatchExactly)
    window.tag_list.setCurrentItem(matches[0])


def test_panel_lists_tags_and_ranges(window: MainWindow) -> None:
    assert [window.tag_list.item(i).text() for i in range(window.tag_list.count())] == ["x", "y"]
    assert [window.range_list.item(i).text() for i in range(window.range_list.count())] == [
        "x: hello",
        "y: world",
    ]


def test_add_and_assign_tags_current_selection(qtbot, window: MainWindow) -> None:
    window.editor.select_range(2, 8)
    window.tag_input.setText("  note ")

    qtbot.mouseClick(window.add_assign_button, Qt.MouseButton.LeftButton)

    document = _session(window).document
    assert "note" in document.tags
    assert ("note", 2, 8) in [(tr.tag_name, tr.start, tr.end) for tr in document.ranges]
    assert window.tag_input.text() == ""
    assert window.range_list.count() == 3


def test_blank_tag_name_is_ignored(qtbot, window: MainWindow) -> None:
    window.tag_input.setText("   ")

    qtbot.mouseClick(window.add_button, Qt.MouseButton.LeftButton)

    assert window.tag_list.count() == 2


def test_delete_tag_cascades_to_ranges(qtbot, window: MainWindow) -> None:
    _select_tag(window, "x")

    qtbot.mouseClick(window.delete_tag_button, Qt.MouseButton.LeftButton)

    assert _session(window).document.tags.names() == ["y"]
    assert window.range_list.count() == 1
    assert window.range_list.item(0).text() == "y: world"


def test_delete_range_removes_selected_entry(qtbot, window: MainWindow) -> None:
    window.range_list.setCurrentRow(1)

    qtbot.mouseClick(window.delete_range_button, Qt.MouseButton.LeftButton)

    assert [tr.tag_name for tr in _session(window).document.ranges] == ["x"]


def test_color_button_updates_tag_color(monkeypatch: pytest.MonkeyPatch, qtbot, window: MainWindow) -> None:
    monkeypatch.setattr(QColorDialog, "getColor", staticmethod(lambda *args, **kwargs: QColor(1, 2, 3)))
    _select_tag(window, "y")

    qtbot.mouseClick(window.color_button, Qt.MouseButton.LeftButton)

    assert _session(window).document.tags.get_color("y") == (1, 2, 3)


def test_setting_checkboxes_update_document(window: MainWindow) -> None:
    window.background_box.setChecked(True)
    window.dark_mode_box.setChecked(True)

    settings = _session(window).document.settings
    assert settings.mark_as_background
    assert settings.dark_mode


def test_sections_markdown_joins_tagged_text() -> None:
    sections = [
        TaggedSection("x", Interval(0, 5), "hello", None),
        TaggedSection("y", Interval(6, 11), "world", (1, 2, 3)),
    ]

    assert sections_markdown(sections) == "**x**\n\nhello\n\n---\n\n**y**\n\nworld"
    assert sections_markdown([]) == ""


def test_markdown_view_follows_setting(window: MainWindow) -> None:
    assert window.markdown_view.isHidden()

    window.markdown_box.setChecked(True)

    assert _session(window).document.settings.markdown_view_enabled
    assert not window.markdown_view.isHidden()
    assert "hello" in window.markdown_view.toPlainText()
    assert "world" in window.markdown_view.toPlainText()

    window.markdown_box.setChecked(False)

    assert window.markdown_view.isHidden()


def test_dark_mode_switches_application_palette(window: MainWindow) -> None:
    dark_window = QColor(*DARK_PALETTE[QPalette.ColorRole.Window])

    window.dark_mode_box.setChecked(True)
    try:
        assert QApplication.palette().color(QPalette.ColorRole.Window) == dark_window
    finally:
        window.dark_mode_box.setChecked(False)

    assert QApplication.palette().color(QPalette.ColorRole.Window) != dark_window
