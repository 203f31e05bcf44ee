"""Parsing and generating session filenames.

Two naming conventions are recognized:

* ``YYYY-MM-DD-<short id>-session.<ext>``, where the short id is at least 8 letters or digits
* ``YYYY-MM-DD-session.<ext>``, the older convention without an id

The date digits and the extension are ASCII only; the extension is one or more letters or digits.

The date is only checked for shape, not for being a real calendar date.
"""

from datetime import date
import re
from typing import Optional, Union

import shortuuid

from sessiondir.models import NO_ID, SessionFileRef

FILENAME_RE = re.compile(r'\A([0-9]{4}-[0-9]{2}-[0-9]{2})(?:-([a-zA-Z0-9]{8,}))?-session\.[a-zA-Z0-9]+\Z')
SHORT_ID_LENGTH = 8


def parse_filename(name: str) -> Optional[SessionFileRef]:
    """Returns the date and short id encoded in a session filename, or None if the name is not one."""
    if not isinstance(name, str):
        return None
    match = FILENAME_RE.match(name)
    if not match:
        return None
    return SessionFileRef(name, match.group(1), match.group(2) or NO_ID)


def new_short_id() -> str:
    return shortuuid.uuid()[:SHORT_ID_LENGTH].lower()


def new_filename(day: Union[date, str], short_id: str = None, suffix: str = '.tmp') -> str:
    """Builds a filename for a session on the given day.

    If short_id is omitted, a random one is generated. Pass :data:`sessiondir.models.NO_ID` to get an
    old-style filename without an id.

    Raises :exc:`ValueError` if the result would not be accepted by :func:`parse_filename`.
    """
    if isinstance(day, date):
        day = day.strftime('%Y-%m-%d')
    if short_id is None:
        short_id = new_short_id()
    if short_id == NO_ID:
        name = f'{day}-session{suffix}'
    else:
        name = f'{day}-{short_id}-session{suffix}'
    if not parse_filename(name):
        raise ValueError(f'Not a valid session filename: {name}')
    return name
