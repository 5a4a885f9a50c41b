"""The document aggregate: buffer, tags, tagged ranges, settings and selection."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict

from .colors import ColorPolicy
from .range_set import RangeSet
from .ranges import Interval
from .tags import TagRegistry
from .validator import clean_invalid_ranges

__all__ = ["APP_NAME", "Document", "DocumentSettings", "WELCOME_TEXT"]

APP_NAME = "buffmonster"
WELCOME_TEXT = f"Welcome to {APP_NAME}! \n\nJust start typing here and tag your things."


@dataclass(slots=True, frozen=True)
class DocumentSettings:
    """View flags persisted alongside the document."""

    dark_mode: bool = False
    markdown_view_enabled: bool = False
    mark_as_background: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {item.name: bool(getattr(self, item.name)) for item in fields(self)}

    def updated(self, **changes: bool | None) -> DocumentSettings:
        """Return a copy with every non-``None`` flag in ``changes`` applied."""

        known = {item.name for item in fields(self)}
        applied = {key: bool(value) for key, value in changes.items() if key in known and value is not None}
        return replace(self, **applied)

    @classmethod
    def from_payload(cls, payload: Any) -> DocumentSettings:
        if not isinstance(payload, Mapping):
            return cls()
        known = {item.name for item in fields(cls)}
        flags = {key: value for key, value in payload.items() if key in known and isinstance(value, bool)}
        return cls(**flags)


@dataclass(slots=True)
class Document:
    """Single owned aggregate processed by the command reducer.

    ``selection`` is ephemeral: it is never serialized and defaults to an empty
    caret at offset 0 after a load.
    """

    buffer: str = ""
    tags: TagRegistry = field(default_factory=TagRegistry)
    ranges: RangeSet = field(default_factory=RangeSet)
    settings: DocumentSettings = field(default_factory=DocumentSettings)
    selection: Interval = field(default_factory=lambda: Interval(0, 0))
    version_id: int = 1

    @classmethod
    def new_default(cls, *, color_policy: ColorPolicy | None = None) -> Document:
        """Return a fresh document holding the placeholder welcome text."""

        return cls(buffer=WELCOME_TEXT, tags=TagRegistry(color_policy=color_policy))

    @property
    def buffer_length(self) -> int:
        return len(self.buffer)

    def copy(self) -> Document:
        return Document(
            buffer=self.buffer,
            tags=self.tags.copy(),
            ranges=self.ranges.copy(),
            settings=self.settings,
            selection=self.selection,
            version_id=self.version_id,
        )

    def update_text(self, new_text: str) -> None:
        """Replace the buffer and bump the version counter."""

        self.buffer = new_text
        self.version_id += 1

    def clean_invalid_ranges(self) -> None:
        self.ranges.replace_all(clean_invalid_ranges(self.ranges, self.buffer_length))
        self.selection = self.selection.clamp(upper=self.buffer_length)

    def to_payload(self) -> Dict[str, Any]:
        """Return the structured storage document."""

        return {
            "buffer": self.buffer,
            "tags": self.tags.to_dict(),
            "tagged_ranges": self.ranges.to_payload(),
            "settings": self.settings.to_dict(),
        }

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        *,
        color_policy: ColorPolicy | None = None,
    ) -> Document:
        """Build a validated document from a parsed storage payload.

        ``buffer`` is required; the remaining sections default to empty.
        """

        buffer = payload.get("buffer")
        if not isinstance(buffer, str):
            raise ValueError("Stored document is missing a text buffer")
        document = cls(
            buffer=buffer,
            tags=TagRegistry.from_payload(payload.get("tags"), color_policy=color_policy),
            ranges=RangeSet.from_payload(payload.get("tagged_ranges")),
            settings=DocumentSettings.from_payload(payload.get("settings")),
        )
        document.clean_invalid_ranges()
        return document
