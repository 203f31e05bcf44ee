"""Reading and changing the contents of session files.

:class:`sessiondir.accessors.base.Accessor` is the API for working with a single file, and
:class:`sessiondir.accessors.session.SessionAccessor` implements it for the session file format.
"""
