"""Single-writer owner of the live document."""

from __future__ import annotations

import logging
from typing import Protocol

from ..core.commands import Command, ReduceResult, reduce
from ..core.document import Document
from ..core.snapshot import RenderSnapshot, build_snapshot
from .store import DocumentStore, LoadSource, SaveResult

__all__ = ["DocumentSession", "SnapshotListener"]

LOGGER = logging.getLogger(__name__)


class SnapshotListener(Protocol):
    """Callback invoked with a fresh snapshot after every dispatched command."""

    def __call__(self, snapshot: RenderSnapshot) -> None:
        ...


class DocumentSession:
    """Runs each command through the reducer, then persists when needed.

    Commands are processed one at a time and fully reconciled, validated and
    saved before :meth:`dispatch` returns. Listeners only ever see snapshots
    of the in-memory document.
    """

    def __init__(
        self,
        store: DocumentStore | None = None,
        document: Document | None = None,
        *,
        source: LoadSource = "default",
    ) -> None:
        self._store = store
        self._document = document or Document.new_default()
        self._source: LoadSource = source
        self._listeners: list[SnapshotListener] = []
        self._last_save: SaveResult | None = None

    @classmethod
    def open(cls, store: DocumentStore) -> DocumentSession:
        outcome = store.load()
        return cls(store, outcome.document, source=outcome.source)

    @property
    def document(self) -> Document:
        return self._document

    @property
    def source(self) -> LoadSource:
        """Where the initial document came from."""

        return self._source

    @property
    def last_save(self) -> SaveResult | None:
        return self._last_save

    def snapshot(self) -> RenderSnapshot:
        return build_snapshot(self._document)

    def add_snapshot_listener(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def remove_snapshot_listener(self, listener: SnapshotListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dispatch(self, command: Command) -> ReduceResult:
        result = reduce(self._document, command)
        self._document = result.document
        if result.needs_save:
            self.save()
        self._notify()
        return result

    def dispatch_all(self, *commands: Command) -> Document:
        for command in commands:
            self.dispatch(command)
        return self._document

    def save(self) -> SaveResult | None:
        if self._store is None:
            return None
        self._last_save = self._store.save(self._document)
        return self._last_save

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:  # pragma: no cover - listener failures are isolated
                LOGGER.exception("Snapshot listener failed")
