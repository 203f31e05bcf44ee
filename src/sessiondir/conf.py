from __future__ import annotations
from dataclasses import dataclass, replace
import os.path
from typing import Callable, Optional


def default_ignore(dirpath: str, filename: str) -> bool:
    return filename.startswith('.')


@dataclass
class SessiondirConf:
    sessions_dir: str
    """The folder holding session files. Only files directly inside it are considered; it is not searched recursively.

    The folder does not need to exist; a missing folder simply contains no sessions.
    """

    suffix: str = '.tmp'
    """The file extension used for new session files, including the leading dot.

    Existing files are recognized regardless of their extension, as long as the name otherwise follows the
    session naming convention (see :mod:`sessiondir.filenames`).
    """

    template_path: Optional[str] = None
    """Path to a Mako template to use for new sessions instead of the built-in one.

    The template is rendered with the variables ``title``, ``date`` (``YYYY-MM-DD``), ``time`` (``HH:MM``),
    and ``filename``. Note that Mako treats lines beginning with ``##`` as comments, so headings such as
    ``### Completed`` must be written as ``${'###'} Completed``.
    """

    ignore: Callable[[str, str], bool] = default_ignore
    """Use this to indicate files in the sessions folder that should not be listed.

    The first argument is the path to the sessions folder, and the second argument is the filename.

    The current default behavior is to ignore all files whose name begins with a period (``.``).
    """

    preview_mode: bool = False
    """If True, changes that would be made to session files are logged instead of performed."""

    @classmethod
    def for_user(cls) -> SessiondirConf:
        path = os.path.expanduser(os.path.join('~', '.sessiondir.conf.py'))
        if not os.path.exists(path):
            raise Exception(f'You need to create the config file: {path}')
        with open(path, 'r') as file:
            conf_script = file.read()
        context = {}
        exec(conf_script, context)
        if 'conf' not in context or not isinstance(context['conf'], cls):
            raise Exception('You need to assign an instance of SessiondirConf to the variable `conf` '
                            f'in your config file: {path}')
        return context['conf']

    def standardize(self):
        return replace(
            self,
            sessions_dir=os.path.realpath(os.path.expanduser(self.sessions_dir)),
            template_path=os.path.expanduser(self.template_path) if self.template_path else None
        )

    def instantiate(self):
        from sessiondir.api import Sessiondir
        return Sessiondir(self.standardize())
