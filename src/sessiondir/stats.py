"""Provides :func:`get_stats`."""

import os.path

from sessiondir.accessors.session import content_stats
from sessiondir.files import read_content
from sessiondir.models import SessionStats


def get_stats(content_or_path: str) -> SessionStats:
    """Counts checklist items and lines in a session.

    The argument is treated as a path only if a regular file exists there; any other string, even one that
    looks like a filename, is treated as the session text itself. A file that cannot be read counts as empty.
    """
    if not isinstance(content_or_path, str):
        return SessionStats()
    content = content_or_path
    if content and os.path.isfile(content):
        content = read_content(content) or ''
    return content_stats(content)
