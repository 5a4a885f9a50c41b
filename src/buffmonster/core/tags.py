"""Registry of named tags and their display colors."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Dict

from .colors import ColorPolicy, ColorTuple, PaletteColorPolicy, normalize_color

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from .range_set import RangeSet

__all__ = ["TagRegistry"]

LOGGER = logging.getLogger(__name__)


class TagRegistry:
    """Owns the set of tags keyed by their (trimmed, case-sensitive) names.

    Ranges refer to tags by name only; :meth:`delete_tag` keeps that weak
    reference honest by cascading into the supplied :class:`RangeSet`.
    """

    def __init__(
        self,
        tags: Mapping[str, ColorTuple] | None = None,
        *,
        color_policy: ColorPolicy | None = None,
    ) -> None:
        self._tags: Dict[str, ColorTuple] = {}
        self._color_policy: ColorPolicy = color_policy or PaletteColorPolicy()
        for name, color in (tags or {}).items():
            self._tags[name] = normalize_color(color)

    def __contains__(self, name: object) -> bool:
        return name in self._tags

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TagRegistry):
            return NotImplemented
        return self._tags == other._tags

    def __repr__(self) -> str:
        return f"TagRegistry({self._tags!r})"

    @property
    def color_policy(self) -> ColorPolicy:
        return self._color_policy

    @color_policy.setter
    def color_policy(self, policy: ColorPolicy) -> None:
        self._color_policy = policy

    def names(self) -> list[str]:
        return list(self._tags)

    def get_color(self, name: str) -> ColorTuple | None:
        return self._tags.get(name)

    def colors(self) -> Dict[str, ColorTuple]:
        return dict(self._tags)

    def create_tag(self, name: str) -> bool:
        """Add ``name`` with an automatically chosen color.

        Returns ``False`` (and changes nothing) for blank or duplicate names.
        """

        cleaned = (name or "").strip()
        if not cleaned or cleaned in self._tags:
            return False
        color = normalize_color(self._color_policy(len(self._tags)))
        self._tags[cleaned] = color
        LOGGER.debug("Created tag %r with color %s", cleaned, color)
        return True

    def set_color(self, name: str, color: Any) -> bool:
        if name not in self._tags:
            return False
        normalized = normalize_color(color)
        if self._tags[name] == normalized:
            return False
        self._tags[name] = normalized
        return True

    def delete_tag(self, name: str, *, ranges: RangeSet | None = None) -> bool:
        """Remove ``name`` and, when given, every range in ``ranges`` using it.

        Ranges naming an unknown tag (for example from a hand-edited state
        file) are still cascaded.
        """

        known = self._tags.pop(name, None) is not None
        removed = ranges.remove_tag(name) if ranges is not None else 0
        if not known and not removed:
            return False
        LOGGER.debug("Deleted tag %r (cascaded %d range(s))", name, removed)
        return True

    def copy(self) -> TagRegistry:
        return TagRegistry(self._tags, color_policy=self._color_policy)

    def to_dict(self) -> dict[str, list[int]]:
        """Return the ``{name: [r, g, b]}`` storage mapping."""

        return {name: list(color) for name, color in self._tags.items()}

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        *,
        color_policy: ColorPolicy | None = None,
    ) -> TagRegistry:
        """Build a registry from either the mapping or the ``[{name, color}]`` form.

        Entries with blank names or unparseable colors are skipped.
        """

        entries: list[tuple[Any, Any]] = []
        if isinstance(payload, Mapping):
            entries = list(payload.items())
        elif isinstance(payload, Sequence) and not isinstance(payload, (str, bytes)):
            for item in payload:
                if isinstance(item, Mapping):
                    entries.append((item.get("name"), item.get("color")))
        registry = cls(color_policy=color_policy)
        for raw_name, raw_color in entries:
            if not isinstance(raw_name, str) or not raw_name.strip():
                continue
            try:
                color = normalize_color(raw_color)
            except (TypeError, ValueError) as exc:
                LOGGER.warning("Skipping tag %r with invalid color: %s", raw_name, exc)
                continue
            registry._tags[raw_name.strip()] = color
        return registry
