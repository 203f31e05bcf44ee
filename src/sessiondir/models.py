"""Defines classes for representing session details, queries, and update requests.

The most important classes are :class:`SessionMetadata`, :class:`SessionInfo`, and :class:`SessionEditCmd`.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional


NO_ID = 'no-id'
"""The :attr:`SessionFileRef.short_id` used for old-format filenames, which carry no identifier."""


@dataclass
class SessionFileRef:
    """The parts of a session filename, as returned by :func:`sessiondir.filenames.parse_filename`."""

    filename: str

    date: str
    """The date portion of the filename, in ``YYYY-MM-DD`` form. It is not guaranteed to be a real calendar date."""

    short_id: str
    """The identifier portion of the filename, or :data:`NO_ID` for old-format filenames."""

    def day(self) -> Optional[date]:
        """Returns :attr:`date` as a :class:`datetime.date`, or None if it is not a valid calendar date."""
        try:
            return datetime.strptime(self.date, '%Y-%m-%d').date()
        except ValueError:
            return None


@dataclass
class SessionMetadata:
    """Container for the details that can be parsed out of a session file's text.

    Any section missing from the text is represented by None, or an empty list for the checklist fields.
    """

    title: Optional[str] = None
    date: Optional[str] = None
    started: Optional[str] = None
    last_updated: Optional[str] = None

    completed: List[str] = field(default_factory=list)
    """Text of the checked items under the Completed heading, in document order."""

    in_progress: List[str] = field(default_factory=list)
    """Text of the unchecked items under the In Progress heading, in document order."""

    notes: Optional[str] = None
    context: Optional[str] = None

    def as_json(self) -> dict:
        return {
            'title': self.title,
            'date': self.date,
            'started': self.started,
            'lastUpdated': self.last_updated,
            'completed': list(self.completed),
            'inProgress': list(self.in_progress),
            'notes': self.notes,
            'context': self.context,
        }


@dataclass
class SessionStats:
    total_items: int = 0
    completed_items: int = 0
    in_progress_items: int = 0
    line_count: int = 0

    def as_json(self) -> dict:
        return {
            'totalItems': self.total_items,
            'completedItems': self.completed_items,
            'inProgressItems': self.in_progress_items,
            'lineCount': self.line_count,
        }


@dataclass
class SessionInfo:
    """Everything known about a single session file.

    A SessionInfo does not imply the file still exists; it reflects the file at the time it was read.
    """

    path: str

    ref: Optional[SessionFileRef] = None
    """Parsed filename, or None if the filename does not follow the session naming convention."""

    metadata: SessionMetadata = field(default_factory=SessionMetadata)
    stats: SessionStats = field(default_factory=SessionStats)

    size: int = 0
    """Size of the file in bytes."""

    modified: Optional[datetime] = None

    @property
    def title(self) -> str:
        return self.metadata.title or 'Untitled Session'

    def as_json(self) -> dict:
        """Returns a dict representing the instance, suitable for serializing as json."""
        return {
            'path': self.path,
            'filename': self.ref.filename if self.ref else None,
            'date': self.ref.date if self.ref else None,
            'shortId': self.ref.short_id if self.ref else None,
            'metadata': self.metadata.as_json(),
            'stats': self.stats.as_json(),
            'size': self.size,
            'modified': self.modified.isoformat() if self.modified else None,
        }


@dataclass
class SessionQuery:
    """Represents criteria for listing sessions.

    If multiple criteria are specified, only sessions that satisfy *all* of them are returned.
    """

    date: Optional[str] = None
    """If set, only sessions whose filename date equals this ``YYYY-MM-DD`` string are returned."""

    search: Optional[str] = None
    """If set, only sessions whose short id contains this string are returned."""

    limit: int = 50
    offset: int = 0

    def matches(self, ref: SessionFileRef) -> bool:
        if self.date and not ref.date == self.date:
            return False
        if self.search and self.search not in ref.short_id:
            return False
        return True


@dataclass
class SessionPage:
    """One page of results from :meth:`sessiondir.repo.SessionRepo.query`."""

    sessions: List[SessionInfo]

    total: int
    """Number of sessions that matched the query, before pagination."""

    offset: int
    limit: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.sessions) < self.total


@dataclass
class SessionEditCmd:
    """Base class for requests to make changes to a session file."""

    path: str
    """Path to the session file that should be changed."""


@dataclass
class CreateCmd(SessionEditCmd):
    """Represents a request to create a new session file. The file must not already exist."""

    contents: str


@dataclass
class SetTitleCmd(SessionEditCmd):
    value: str


@dataclass
class SetLastUpdatedCmd(SessionEditCmd):
    """Represents a request to change the ``**Last Updated:**`` line, typically to an ``HH:MM`` time."""

    value: str


@dataclass
class AddItemCmd(SessionEditCmd):
    """Represents a request to add a checklist item.

    If the item is already present in the target section, this request should be treated as a no-op.
    """

    value: str

    completed: bool = False
    """If True the item goes under Completed, otherwise under In Progress."""


@dataclass
class CompleteItemCmd(SessionEditCmd):
    """Represents a request to move an item from In Progress to Completed.

    If the item is not in progress, this request should be treated as a no-op.
    """

    value: str
