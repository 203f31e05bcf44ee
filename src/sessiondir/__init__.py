"""Helps manage developer session notes stored as plain files in a folder.

The functions in :mod:`sessiondir.files`, :mod:`sessiondir.filenames`, and :mod:`sessiondir.stats`, along with
:func:`sessiondir.accessors.session.parse_metadata`, work on individual files or strings.

To work with a whole folder of sessions, look at :class:`sessiondir.api.Sessiondir`
"""
