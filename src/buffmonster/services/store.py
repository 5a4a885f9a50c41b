"""Durable save/load of the document plus a raw-text backup.

The structured document is the primary source. The backup only ever holds
the buffer text and is read when the structured document is missing or
unreadable. Both writes are best-effort: failures are logged and reported in
the returned :class:`SaveResult` but never raised.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..core.colors import ColorPolicy
from ..core.document import Document
from ..utils import file_io
from .config import AppConfig

__all__ = ["DocumentStore", "LoadOutcome", "SaveResult"]

LOGGER = logging.getLogger(__name__)

LoadSource = Literal["state", "backup", "default"]


@dataclass(slots=True, frozen=True)
class SaveResult:
    """Which artifacts were written by :meth:`DocumentStore.save`."""

    state_written: bool
    backup_written: bool

    @property
    def ok(self) -> bool:
        return self.state_written and self.backup_written


@dataclass(slots=True, frozen=True)
class LoadOutcome:
    document: Document
    source: LoadSource


class DocumentStore:
    """Persistence adapter for :class:`~buffmonster.core.document.Document`."""

    def __init__(
        self,
        state_path: Path | str,
        backup_path: Path | str,
        *,
        max_attempts: int = 3,
        retry_min_seconds: float = 0.05,
        retry_max_seconds: float = 0.5,
        color_policy: ColorPolicy | None = None,
    ) -> None:
        self._state_path = Path(state_path)
        self._backup_path = Path(backup_path)
        self._max_attempts = max(1, int(max_attempts))
        self._retry_min_seconds = retry_min_seconds
        self._retry_max_seconds = retry_max_seconds
        self._color_policy = color_policy

    @classmethod
    def from_config(cls, config: AppConfig, *, color_policy: ColorPolicy | None = None) -> DocumentStore:
        return cls(
            config.state_path,
            config.backup_path,
            max_attempts=config.save_retries,
            color_policy=color_policy,
        )

    @property
    def state_path(self) -> Path:
        return self._state_path

    @property
    def backup_path(self) -> Path:
        return self._backup_path

    def save(self, document: Document) -> SaveResult:
        """Write the structured document atomically, then the raw backup."""

        body = json.dumps(document.to_payload(), indent=2, ensure_ascii=False)
        state_written = self._write(self._state_path, body, label="state")
        backup_written = self._write(self._backup_path, document.buffer, label="backup")
        if state_written:
            LOGGER.debug("Saved state to %s", self._state_path)
        return SaveResult(state_written=state_written, backup_written=backup_written)

    def load(self) -> LoadOutcome:
        """Load the document, falling back to the backup text, then to defaults."""

        document = self._read_state()
        if document is not None:
            LOGGER.info("Loaded state from %s", self._state_path)
            return LoadOutcome(document=document, source="state")

        recovered = self._read_backup()
        fresh = Document.new_default(color_policy=self._color_policy)
        if recovered:
            LOGGER.warning("Recovered buffer text from backup %s", self._backup_path)
            fresh.buffer = recovered
            return LoadOutcome(document=fresh, source="backup")

        LOGGER.info("No saved state found, starting fresh")
        return LoadOutcome(document=fresh, source="default")

    def _write(self, path: Path, content: str, *, label: str) -> bool:
        try:
            for attempt in self._retrying():
                with attempt:
                    file_io.write_text(path, content, atomic=True)
        except OSError as exc:
            LOGGER.warning("Failed to write %s file %s: %s", label, path, exc)
            return False
        return True

    def _retrying(self) -> Retrying:
        return Retrying(
            reraise=True,
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._retry_min_seconds, max=self._retry_max_seconds),
            retry=retry_if_exception_type(OSError),
        )

    def _read_state(self) -> Document | None:
        if not self._state_path.exists():
            return None
        try:
            text = file_io.read_text(self._state_path, encoding="utf-8")
            payload = json.loads(text)
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("State file %s could not be read: %s", self._state_path, exc)
            return None
        except json.JSONDecodeError as exc:
            LOGGER.warning("State file %s is not valid JSON: %s", self._state_path, exc)
            return None
        if not isinstance(payload, dict):
            LOGGER.warning("State file %s does not contain a JSON object", self._state_path)
            return None
        try:
            return Document.from_payload(payload, color_policy=self._color_policy)
        except (TypeError, ValueError) as exc:
            LOGGER.warning("State file %s is malformed: %s", self._state_path, exc)
            return None

    def _read_backup(self) -> str | None:
        if not self._backup_path.exists():
            return None
        try:
            return file_io.read_text(self._backup_path, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("Backup file %s could not be read: %s", self._backup_path, exc)
            return None
