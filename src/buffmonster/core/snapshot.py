"""Read-only views handed to renderers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .colors import ColorTuple, mix_colors
from .document import Document, DocumentSettings
from .range_set import TaggedRange
from .ranges import Interval

__all__ = ["PREVIEW_LIMIT", "RenderSnapshot", "TaggedSection", "build_snapshot"]

PREVIEW_LIMIT = 30


@dataclass(slots=True, frozen=True)
class TaggedSection:
    """A tagged range paired with its text, as shown by the markdown view."""

    tag_name: str
    interval: Interval
    text: str
    color: ColorTuple | None


@dataclass(slots=True, frozen=True)
class RenderSnapshot:
    """Immutable copy of everything a renderer may read.

    Renderers must tolerate ranges touching the end of the buffer; ranges are
    ordered by ``start``.
    """

    buffer: str
    ranges: tuple[TaggedRange, ...]
    colors: Dict[str, ColorTuple]
    settings: DocumentSettings
    selection: Interval
    version_id: int

    def color_for(self, tagged: TaggedRange) -> ColorTuple | None:
        return self.colors.get(tagged.tag_name)

    def colormap(self) -> Dict[int, ColorTuple]:
        """Map each tagged offset to its color, averaging overlapping tags.

        Ranges whose tag has no color are skipped.
        """

        colormap: Dict[int, ColorTuple] = {}
        for tagged in self.ranges:
            color = self.colors.get(tagged.tag_name)
            if color is None:
                continue
            for offset in range(tagged.start, min(tagged.end, len(self.buffer))):
                existing = colormap.get(offset)
                colormap[offset] = color if existing is None else mix_colors(existing, color)
        return colormap

    def color_runs(self) -> list[tuple[int, int, ColorTuple]]:
        """Collapse :meth:`colormap` into ``(start, end, color)`` runs."""

        runs: list[tuple[int, int, ColorTuple]] = []
        for offset, color in sorted(self.colormap().items()):
            if runs and runs[-1][1] == offset and runs[-1][2] == color:
                start, _, _ = runs[-1]
                runs[-1] = (start, offset + 1, color)
            else:
                runs.append((offset, offset + 1, color))
        return runs

    def preview(self, tagged: TaggedRange, *, limit: int = PREVIEW_LIMIT) -> str:
        """Return the range's text up to its first newline, capped at ``limit``."""

        text = self.buffer[tagged.start : tagged.end]
        return text.split("\n", 1)[0][:limit]

    def sections(self) -> list[TaggedSection]:
        """Return the text of every range in buffer order."""

        length = len(self.buffer)
        return [
            TaggedSection(
                tag_name=tagged.tag_name,
                interval=tagged.interval,
                text=self.buffer[tagged.start : tagged.end],
                color=self.colors.get(tagged.tag_name),
            )
            for tagged in self.ranges
            if tagged.end <= length
        ]


def build_snapshot(document: Document) -> RenderSnapshot:
    return RenderSnapshot(
        buffer=document.buffer,
        ranges=document.ranges.query_snapshot(),
        colors=document.tags.colors(),
        settings=document.settings,
        selection=document.selection,
        version_id=document.version_id,
    )
