"""Provides the main entry point for using the library, :class:`Sessiondir`"""

from __future__ import annotations
from datetime import datetime
import os.path
from typing import Optional

from mako.template import Template

from sessiondir.conf import SessiondirConf
from sessiondir.filenames import new_filename
from sessiondir.files import delete_session
from sessiondir.models import AddItemCmd, CompleteItemCmd, CreateCmd, SetLastUpdatedCmd, SetTitleCmd
from sessiondir.repo import SessionRepo

# Mako treats lines starting with ## as comments, so section headings are emitted as expressions.
DEFAULT_TEMPLATE = """\
# ${title}

**Date:** ${date}
**Started:** ${time}
**Last Updated:** ${time}

${'###'} Completed

${'###'} In Progress

${'###'} Notes for Next Session

${'###'} Context to Load
```
```
"""


class Sessiondir:
    """Main entry point for working programmatically with a folder of session files.

    Generally, you should get an instance using the :meth:`Sessiondir.for_user` method.

    The :attr:`repo` attribute, which is an instance of :class:`sessiondir.repo.SessionRepo`, provides listing
    and lookup of sessions. For reading or writing a single file by path, the functions in
    :mod:`sessiondir.files` are simpler.

    .. attribute:: conf
       :type: sessiondir.conf.SessiondirConf

       Typically loaded from the variable ``conf`` in the file ``~/.sessiondir.conf.py``

    .. attribute:: repo
       :type: sessiondir.repo.SessionRepo

    Here's an example that starts a session and records some progress:

    .. code-block:: python

       from sessiondir.api import Sessiondir
       sd = Sessiondir.for_user()
       path = sd.new('Fix login flow')
       sd.add_item(path, 'Write regression test')
       sd.complete_item(path, 'Write regression test')
    """

    @staticmethod
    def for_user() -> Sessiondir:
        """Creates an instance using the user's ``~/.sessiondir.conf.py`` file.

        Raises :exc:`Exception` if it does not exist or does not define configuration.
        """
        return SessiondirConf.for_user().instantiate()

    def __init__(self, conf: SessiondirConf):
        self.conf = conf
        self.repo = SessionRepo(conf)

    def path_for(self, filename: str) -> str:
        return os.path.join(self.conf.sessions_dir, filename)

    def template(self) -> Template:
        """Returns the template for new sessions: the configured one if set, otherwise the built-in one.

        Raises :exc:`FileNotFoundError` if a template is configured but does not exist.
        """
        if self.conf.template_path:
            if not os.path.isfile(self.conf.template_path):
                raise FileNotFoundError(f'Template does not exist: {self.conf.template_path}')
            return Template(filename=os.path.abspath(self.conf.template_path))
        return Template(text=DEFAULT_TEMPLATE)

    def new(self, title: str = None, short_id: str = None, when: datetime = None) -> str:
        """Creates a new session file in the sessions folder and returns its path.

        If short_id is not given, a random one is generated. ``when`` defaults to the current time, and is used
        for both the filename's date and the Started/Last Updated times.

        Raises :exc:`sessiondir.accessors.base.ChangeError` if the file already exists, or the folder does
        not exist.
        """
        when = when or datetime.now()
        filename = new_filename(when.date(), short_id, self.conf.suffix)
        content = self.template().render(title=title or 'Session',
                                         date=when.strftime('%Y-%m-%d'),
                                         time=when.strftime('%H:%M'),
                                         filename=filename)
        path = self.path_for(filename)
        self.repo.change([CreateCmd(path, contents=content)])
        return path

    def add_item(self, path: str, item: str, completed: bool = False) -> None:
        self.repo.change([AddItemCmd(path, item, completed=completed)])

    def complete_item(self, path: str, item: str) -> None:
        self.repo.change([CompleteItemCmd(path, item)])

    def set_title(self, path: str, title: str) -> None:
        self.repo.change([SetTitleCmd(path, title)])

    def touch(self, path: str, when: Optional[datetime] = None) -> None:
        """Sets the Last Updated time of the session to ``when`` (default now), as ``HH:MM``."""
        when = when or datetime.now()
        self.repo.change([SetLastUpdatedCmd(path, when.strftime('%H:%M'))])

    def delete(self, session_id: str) -> bool:
        """Deletes the session found by :meth:`sessiondir.repo.SessionRepo.find`.

        Returns False if no session matched or it could not be deleted.
        """
        info = self.repo.find(session_id)
        if not info:
            return False
        return delete_session(info.path)
