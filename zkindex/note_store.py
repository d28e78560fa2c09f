"""Note stores: the universe of notes the index is built over."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Pattern, Protocol, Set

from zkindex.errors import NoteNotFound
from zkindex.models import Note, NoteMetadata

logger = logging.getLogger(__name__)

DEFAULT_ID_PATTERN = r"\d{12}"
ID_TIME_FORMAT = "%Y%m%d%H%M"


def compile_pattern(term: str) -> Pattern[str]:
    """Compile ``term`` as a case-sensitive regexp, or as a literal if it is not one."""
    try:
        return re.compile(term)
    except re.error:
        return re.compile(re.escape(term))


class NoteStore(Protocol):
    """Read-only view of a note corpus."""

    def list_all(self) -> List[Note]:
        pass

    def get(self, note_id: str) -> Note:
        pass

    def title_matches(self, term: str) -> Set[str]:
        pass

    def content_matches(self, term: str) -> Set[str]:
        pass

    def resolve_path(self, note_id: str) -> str:
        pass

    def metadata(self, note_id: str) -> NoteMetadata:
        pass


class InMemoryNoteStore:
    """Dict-backed store, handy for tests and for callers that already hold notes."""

    def __init__(self, notes: Iterable[Note] = (), contents: Optional[Mapping[str, str]] = None):
        self._notes: Dict[str, Note] = {}
        for note in notes:
            self._notes[note.id] = note
        self._contents: Dict[str, str] = dict(contents or {})

    def add(self, note: Note, content: str = "") -> None:
        self._notes[note.id] = note
        self._contents[note.id] = content

    def remove(self, note_id: str) -> None:
        self._notes.pop(note_id, None)
        self._contents.pop(note_id, None)

    def list_all(self) -> List[Note]:
        return list(self._notes.values())

    def get(self, note_id: str) -> Note:
        try:
            return self._notes[note_id]
        except KeyError:
            raise NoteNotFound(note_id) from None

    def title_matches(self, term: str) -> Set[str]:
        pattern = compile_pattern(term)
        return {note.id for note in self._notes.values() if pattern.search(note.title)}

    def content_matches(self, term: str) -> Set[str]:
        pattern = compile_pattern(term)
        return {
            note_id
            for note_id in self._notes
            if pattern.search(self._contents.get(note_id, ""))
        }

    def resolve_path(self, note_id: str) -> str:
        return self.get(note_id).path

    def metadata(self, note_id: str) -> NoteMetadata:
        return self.get(note_id).metadata


class FileNoteStore:
    """Flat directory of notes named ``<id> <title><extension>``.

    Every call re-scans the directory, so edits made outside the index show
    up on the next refresh.
    """

    def __init__(
        self,
        root: Path | str,
        extension: str = ".md",
        id_pattern: str = DEFAULT_ID_PATTERN,
    ):
        self.notes_dir = Path(root).expanduser()
        self.extension = extension
        self._name_re = re.compile(rf"^(?P<id>{id_pattern})(?:\s+(?P<title>.*))?$")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def list_all(self) -> List[Note]:
        return list(self._scan().values())

    def get(self, note_id: str) -> Note:
        notes = self._scan()
        if note_id not in notes:
            raise NoteNotFound(note_id)
        return notes[note_id]

    def title_matches(self, term: str) -> Set[str]:
        pattern = compile_pattern(term)
        return {note.id for note in self._scan().values() if pattern.search(note.title)}

    def content_matches(self, term: str) -> Set[str]:
        pattern = compile_pattern(term)
        matched: Set[str] = set()
        for note in self._scan().values():
            try:
                text = Path(note.path).read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                # Vanished between scan and read; it simply does not match.
                logger.debug("Skipping unreadable note %s: %s", note.path, exc)
                continue
            if pattern.search(text):
                matched.add(note.id)
        return matched

    def resolve_path(self, note_id: str) -> str:
        return self.get(note_id).path

    def metadata(self, note_id: str) -> NoteMetadata:
        return self.get(note_id).metadata

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _scan(self) -> Dict[str, Note]:
        notes: Dict[str, Note] = {}
        if not self.notes_dir.is_dir():
            logger.warning("Notes directory does not exist: %s", self.notes_dir)
            return notes

        for path in sorted(self.notes_dir.iterdir()):
            if not path.is_file() or not path.name.endswith(self.extension):
                continue
            note = self._read_note(path)
            if note is None:
                continue
            if note.id in notes:
                logger.warning("Duplicate note id %s: ignoring %s", note.id, path.name)
                continue
            notes[note.id] = note

        logger.debug("Scanned %d notes in %s", len(notes), self.notes_dir)
        return notes

    def _read_note(self, path: Path) -> Optional[Note]:
        stem = path.name[: len(path.name) - len(self.extension)] if self.extension else path.name
        match = self._name_re.match(stem)
        if not match:
            return None

        try:
            stat = path.stat()
        except OSError:
            return None

        note_id = match.group("id")
        title = (match.group("title") or "").strip() or "Untitled"
        return Note(
            id=note_id,
            title=title,
            path=str(path),
            modified_at=stat.st_mtime,
            created_at=self._created_from_id(note_id, stat.st_ctime),
            size_bytes=stat.st_size,
        )

    def _created_from_id(self, note_id: str, fallback: float) -> float:
        try:
            return datetime.strptime(note_id[:12], ID_TIME_FORMAT).timestamp()
        except ValueError:
            return fallback
