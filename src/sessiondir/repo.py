"""Provides the :class:`SessionRepo` class."""

from datetime import datetime
import logging
import os
import os.path
from typing import Iterator, List, Optional

from sessiondir.accessors.base import ChangeError, ParseError
from sessiondir.accessors.session import SessionAccessor
from sessiondir.conf import SessiondirConf
from sessiondir.filenames import parse_filename
from sessiondir.models import CreateCmd, NO_ID, SessionEditCmd, SessionInfo, SessionPage, SessionQuery

logger = logging.getLogger(__name__)


def _group_edits(edits: List[SessionEditCmd]) -> List[List[SessionEditCmd]]:
    group = None
    result = []
    for edit in edits:
        if group and edit.path == group[0].path and not isinstance(group[0], CreateCmd) \
                and not isinstance(edit, CreateCmd):
            group.append(edit)
        else:
            group = [edit]
            result.append(group)
    return result


class SessionRepo:
    """Reads, lists, and changes the session files in a single folder.

    Files are accessed directly on every call; nothing is cached.

    .. attribute:: conf
       :type: SessiondirConf
    """
    def __init__(self, conf: SessiondirConf):
        self.conf = conf
        self.accessor_factory = SessionAccessor

    def paths(self) -> Iterator[str]:
        """Yields the paths of all session files in the folder, in directory order."""
        root = self.conf.sessions_dir
        if not os.path.isdir(root):
            return
        for entry in os.scandir(root):
            if self.conf.ignore(root, entry.name):
                continue
            if not entry.is_file() or not parse_filename(entry.name):
                continue
            yield entry.path

    def info(self, path: str) -> SessionInfo:
        """Returns the details of the given session file.

        May raise :exc:`sessiondir.accessors.base.ParseError`.
        """
        return self.accessor_factory(path).info()

    def _try_info(self, path: str) -> Optional[SessionInfo]:
        try:
            return self.info(path)
        except ParseError as e:
            logger.debug('Skipping %s: %r', path, e.cause or e)
            return None

    def query(self, query: Optional[SessionQuery] = None) -> SessionPage:
        """Returns the sessions matching the query, most recently modified first.

        Files that cannot be read are left out of the results.
        """
        query = query or SessionQuery()
        matched = []
        for path in self.paths():
            if not query.matches(parse_filename(os.path.basename(path))):
                continue
            info = self._try_info(path)
            if info:
                matched.append(info)
        matched.sort(key=lambda info: (info.modified or datetime.min, info.path), reverse=True)
        offset = max(query.offset, 0)
        limit = max(query.limit, 0)
        return SessionPage(matched[offset:offset + limit], total=len(matched), offset=offset, limit=limit)

    def find(self, session_id: str) -> Optional[SessionInfo]:
        """Looks up a session by its short id (or a prefix of it), or by its filename with or without extension.

        For old-format files, which have no id, ``YYYY-MM-DD`` matches ``YYYY-MM-DD-session.<ext>``.
        Matching files that cannot be read are skipped. Returns None if nothing readable matches.
        """
        if not session_id:
            return None
        for path in self.paths():
            ref = parse_filename(os.path.basename(path))
            stem = os.path.splitext(ref.filename)[0]
            if ref.short_id == NO_ID:
                matched = stem == f'{session_id}-session'
            else:
                matched = ref.short_id.startswith(session_id)
            if matched or session_id in (ref.filename, stem):
                info = self._try_info(path)
                if info:
                    return info
        return None

    def change(self, edits: List[SessionEditCmd]) -> None:
        """Applies the specified edits and saves the affected files. Changes are applied in order.

        May raise :exc:`sessiondir.accessors.base.ChangeError`.
        Changes are not applied atomically.
        """
        for group in _group_edits(edits):
            if self.conf.preview_mode:
                for edit in group:
                    logger.info('Would apply %s', edit)
                continue

            if isinstance(group[0], CreateCmd):
                edit = group[0]
                try:
                    with open(edit.path, 'x', encoding='utf-8', newline='') as file:
                        file.write(edit.contents)
                except OSError as e:
                    raise ChangeError(f'Cannot create session file {edit.path}', group, e)
            else:
                acc = self.accessor_factory(group[0].path)
                for edit in group:
                    acc.edit(edit)
                acc.save()
