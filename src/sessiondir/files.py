"""Basic operations on individual session files.

None of these functions raise for filesystem problems; failures are reported through the return value
(``None``, ``False``, or a default string) and logged at debug level.

Text is read and written as UTF-8 with newlines left untranslated, so content read back is exactly what
was written. Bytes that are not valid UTF-8 are read as U+FFFD rather than making the whole file unreadable.
"""

import logging
import os
from typing import Optional

from sessiondir.accessors.session import extract_title

logger = logging.getLogger(__name__)

UNTITLED = 'Untitled Session'
SIZE_UNITS = ['B', 'KB', 'MB', 'GB', 'TB']


def read_content(path: str) -> Optional[str]:
    """Returns the text of the file, or None if it does not exist or cannot be read."""
    try:
        with open(path, 'r', encoding='utf-8', errors='replace', newline='') as file:
            return file.read()
    except (OSError, UnicodeError, ValueError, TypeError) as e:
        logger.debug('Cannot read %s: %r', path, e)
        return None


def _write(path: str, content: str, mode: str) -> bool:
    # Encode before opening so a failed encode leaves the file untouched.
    if not isinstance(content, str):
        logger.debug('Cannot write %s: content is %r', path, type(content))
        return False
    try:
        data = content.encode('utf-8')
        with open(path, mode + 'b') as file:
            file.write(data)
        return True
    except (OSError, UnicodeError, ValueError, TypeError) as e:
        logger.debug('Cannot write %s: %r', path, e)
        return False


def write_content(path: str, content: str) -> bool:
    """Creates or overwrites the file. Returns False if the parent directory is missing or the write fails."""
    return _write(path, content, 'w')


def append_content(path: str, content: str) -> bool:
    """Appends to the file, creating it if necessary. Returns False under the same conditions as write_content."""
    return _write(path, content, 'a')


def delete_session(path: str) -> bool:
    """Removes the file. Returns True if a file was removed, and False if there was nothing to remove."""
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        return False
    except (OSError, ValueError) as e:
        logger.debug('Cannot delete %s: %r', path, e)
        return False


def session_exists(path: str) -> bool:
    """Returns True only if the path exists and is a regular file."""
    try:
        return os.path.isfile(path)
    except TypeError:
        return False


def format_size(num_bytes: int) -> str:
    """Formats a byte count using binary units, e.g. ``512 B`` or ``2.0 KB``."""
    if num_bytes < 1024:
        return f'{num_bytes} B'
    size = float(num_bytes)
    for unit in SIZE_UNITS[1:]:
        size /= 1024
        if size < 1024 or unit == SIZE_UNITS[-1]:
            return f'{size:.1f} {unit}'


def get_size(path: str) -> str:
    """Returns the size of the file as a human-readable string, or ``0 B`` if it is not an existing regular file."""
    if not session_exists(path):
        return '0 B'
    try:
        return format_size(os.stat(path).st_size)
    except (OSError, ValueError, TypeError) as e:
        logger.debug('Cannot stat %s: %r', path, e)
        return '0 B'


def get_title(path: str) -> str:
    """Returns the title from the file's first ``# `` heading, or ``Untitled Session`` if there is none."""
    return extract_title(read_content(path)) or UNTITLED
