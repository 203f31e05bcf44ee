"""Defines the read/edit/save lifecycle shared by session file accessors.

The most important class is :class:`Accessor`.
"""

from typing import List

from sessiondir.models import AddItemCmd, CompleteItemCmd, SessionEditCmd, SessionInfo, SetLastUpdatedCmd,\
    SetTitleCmd


class ParseError(Exception):
    """Raised when a session file cannot be read."""
    def __init__(self, message: str, path: str, cause: BaseException = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause


class ChangeError(Exception):
    """Raised when a session file cannot be created, edited or written."""
    def __init__(self, message: str, edits: List[SessionEditCmd], cause: BaseException = None):
        super().__init__(message)
        self.message = message
        self.edits = edits
        self.cause = cause


class UnsupportedChangeError(ChangeError):
    """Raised for an edit command that session accessors do not know how to apply."""
    def __init__(self, edit: SessionEditCmd):
        super().__init__('Unsupported edit', [edit])


class Accessor:
    """Reads one session file and applies session edit commands to its text.

    An instance wraps the single path given to the constructor. The file is read lazily, on the first call
    to :meth:`info` or :meth:`edit`; edits then accumulate in memory until :meth:`save` writes them out.

    .. attribute:: path
       :type: str

    .. attribute:: edited
       :type: bool

       True while the in-memory session text differs from what was last read or saved.
    """
    def __init__(self, path: str):
        self.path = path
        self._loaded = False
        self.edited = False

    def load(self) -> None:
        """Reads the session file. Callers rarely need this, since :meth:`info` and :meth:`edit` load on demand.

        May raise :exc:`ParseError`.
        """
        try:
            self._load()
        except Exception as e:
            self._loaded = False
            raise e
        self._loaded = True

    def info(self) -> SessionInfo:
        """Returns the parsed filename, metadata, checklist stats and file details of the session.

        Reflects unsaved edits, and does not re-read the file once it has been loaded.

        May raise :exc:`ParseError`.
        """
        if not self._loaded:
            self.load()
        info = SessionInfo(self.path)
        self._info(info)
        return info

    def edit(self, edit: SessionEditCmd) -> None:
        """Applies a title, Last Updated, or checklist edit to the in-memory session text.

        Nothing is written until :meth:`save` is called. Edits that leave the text as it was, such as adding an
        item that is already listed, do not mark the session as edited.

        Raises :exc:`UnsupportedChangeError` for other kinds of edit, and :exc:`ValueError` if the edit is
        for a different file.
        """
        if not edit.path == self.path:
            raise ValueError(f'Accessor path [{self.path}] is different from path of edit: {edit}')
        if not self._loaded:
            self.load()
        self._edit(edit)

    def _edit(self, edit: SessionEditCmd) -> None:
        if isinstance(edit, SetTitleCmd):
            self._set_title(edit)
        elif isinstance(edit, SetLastUpdatedCmd):
            self._set_last_updated(edit)
        elif isinstance(edit, AddItemCmd):
            self._add_item(edit)
        elif isinstance(edit, CompleteItemCmd):
            self._complete_item(edit)
        else:
            raise UnsupportedChangeError(edit)

    def save(self) -> bool:
        """Writes the edited session text back to its file.

        Returns False without touching the file if no edit changed anything. Raises :exc:`ChangeError` if
        the file cannot be written. Whatever is on disk is replaced, including changes made by others since
        the session was loaded.
        """
        if not self.edited:
            return False
        self._save()
        self.edited = False
        return True

    def _load(self):
        """Reads the file; should raise :exc:`ParseError` if it cannot."""
        raise NotImplementedError()

    def _info(self, info: SessionInfo) -> None:
        """Fills in everything except :attr:`info.path`, which is already set."""
        raise NotImplementedError()

    def _save(self) -> None:
        """Writes the session text; only called when :attr:`edited` is True."""
        raise NotImplementedError()

    def _set_title(self, edit: SetTitleCmd):
        raise UnsupportedChangeError(edit)

    def _set_last_updated(self, edit: SetLastUpdatedCmd):
        raise UnsupportedChangeError(edit)

    def _add_item(self, edit: AddItemCmd):
        """Should set :attr:`edited` unless the item is already in the target section."""
        raise UnsupportedChangeError(edit)

    def _complete_item(self, edit: CompleteItemCmd):
        """Should set :attr:`edited` only if the item was in progress."""
        raise UnsupportedChangeError(edit)
