"""Provides :func:`parse_metadata` and the :class:`SessionAccessor` class."""

import os
import re
from datetime import datetime
from typing import List, Optional, Tuple

from sessiondir.accessors.base import Accessor, ChangeError, ParseError
from sessiondir.filenames import parse_filename
from sessiondir.models import AddItemCmd, CompleteItemCmd, SessionInfo, SessionMetadata, SessionStats,\
    SetLastUpdatedCmd, SetTitleCmd

TITLE_RE = re.compile(r'^# +(\S.*?)\s*$')
HEADING_RE = re.compile(r'^(#{1,6})[ \t]+(.*?)[ \t]*$')
FENCE_RE = re.compile(r'^\s*```')
CHECKED_RE = re.compile(r'^\s*- \[[xX]\](?:\s+(.*?))?\s*$')
UNCHECKED_RE = re.compile(r'^\s*- \[ \](?:\s+(.*?))?\s*$')

COMPLETED = 'Completed'
IN_PROGRESS = 'In Progress'
NOTES = 'Notes for Next Session'
CONTEXT = 'Context to Load'

DATE_LABEL = 'Date'
STARTED_LABEL = 'Started'
LAST_UPDATED_LABEL = 'Last Updated'


def _label_re(label: str):
    return re.compile(rf'\*\*{re.escape(label)}:\*\*[ \t]*([^\r\n]*)')


def _extract_label(doc: str, label: str) -> Optional[str]:
    match = _label_re(label).search(doc)
    return match.group(1).strip() if match else None


def _headings(lines: List[str]) -> List[Tuple[int, int, str]]:
    """Returns (line index, level, text) for every heading that is not inside a fenced code block."""
    result = []
    fenced = False
    for i, line in enumerate(lines):
        if FENCE_RE.match(line):
            fenced = not fenced
            continue
        if fenced:
            continue
        match = HEADING_RE.match(line)
        if match:
            result.append((i, len(match.group(1)), match.group(2)))
    return result


def _section_span(lines: List[str], name: str) -> Optional[Tuple[int, int]]:
    """Returns the index of the heading line for the named section and the index just past its last line."""
    headings = _headings(lines)
    for pos, (start, level, text) in enumerate(headings):
        if not text.lower() == name.lower():
            continue
        for end, other_level, _ in headings[pos + 1:]:
            if other_level <= level:
                return start, end
        return start, len(lines)
    return None


def _section_lines(lines: List[str], name: str) -> Optional[List[str]]:
    span = _section_span(lines, name)
    if span is None:
        return None
    return lines[span[0] + 1:span[1]]


def _extract_items(section: Optional[List[str]], item_re) -> List[str]:
    items = []
    for line in section or []:
        match = item_re.match(line)
        if match and match.group(1):
            items.append(match.group(1).strip())
    return items


def _extract_block(section: Optional[List[str]], strip_fences: bool = False) -> Optional[str]:
    if section is None:
        return None
    if strip_fences:
        section = [line for line in section if not FENCE_RE.match(line)]
    return '\n'.join(section).strip()


def extract_title(doc: Optional[str]) -> Optional[str]:
    """Returns the text of the first ``# `` heading, or None."""
    for line in (doc or '').splitlines():
        match = TITLE_RE.match(line)
        if match:
            return match.group(1)
    return None


def parse_metadata(doc: Optional[str]) -> SessionMetadata:
    """Extracts whatever metadata is present in the text of a session file.

    Every field is extracted independently, so sections can appear in any order, and missing or malformed
    sections just leave the corresponding field empty. This never raises.
    """
    if not doc or not isinstance(doc, str):
        return SessionMetadata()
    lines = doc.splitlines()
    return SessionMetadata(
        title=extract_title(doc),
        date=_extract_label(doc, DATE_LABEL),
        started=_extract_label(doc, STARTED_LABEL),
        last_updated=_extract_label(doc, LAST_UPDATED_LABEL),
        completed=_extract_items(_section_lines(lines, COMPLETED), CHECKED_RE),
        in_progress=_extract_items(_section_lines(lines, IN_PROGRESS), UNCHECKED_RE),
        notes=_extract_block(_section_lines(lines, NOTES)),
        context=_extract_block(_section_lines(lines, CONTEXT), strip_fences=True),
    )


def content_stats(doc: Optional[str]) -> SessionStats:
    """Counts checklist items anywhere in the text, along with the number of lines."""
    if not doc or not isinstance(doc, str):
        return SessionStats()
    lines = doc.splitlines()
    completed = sum(1 for line in lines if CHECKED_RE.match(line))
    in_progress = sum(1 for line in lines if UNCHECKED_RE.match(line))
    return SessionStats(total_items=completed + in_progress,
                        completed_items=completed,
                        in_progress_items=in_progress,
                        line_count=len(lines))


class SessionAccessor(Accessor):
    """Responsible for parsing and updating session files.

    A session file looks like this:

    .. code-block:: markdown

       # Fixing the login flow

       **Date:** 2026-02-01
       **Started:** 10:30
       **Last Updated:** 14:45

       ### Completed
       - [x] Reproduce the bug

       ### In Progress
       - [ ] Write a regression test

       ### Notes for Next Session
       The staging database is stale.

       ### Context to Load
       ```
       src/auth/login.py
       ```

    Edits are made line by line, so any text this class does not understand is preserved as it was.
    """
    def _load(self):
        try:
            with open(self.path, 'r', encoding='utf-8', errors='replace', newline='') as file:
                self.text = file.read()
            self._stat = os.stat(self.path)
        except (OSError, UnicodeError) as e:
            raise ParseError('Cannot read session file', self.path, e)
        self._newline = '\r\n' if '\r\n' in self.text else '\n'

    def _info(self, info: SessionInfo):
        info.ref = parse_filename(os.path.basename(self.path))
        info.metadata = parse_metadata(self.text)
        info.stats = content_stats(self.text)
        info.size = self._stat.st_size
        info.modified = datetime.fromtimestamp(self._stat.st_mtime)

    def _save(self):
        try:
            data = self.text.encode('utf-8')
            with open(self.path, 'wb') as file:
                file.write(data)
        except (OSError, UnicodeError) as e:
            raise ChangeError('Cannot write session file', [], e)

    def _lines(self) -> List[str]:
        return self.text.splitlines()

    def _update(self, lines: List[str]):
        text = self._newline.join(lines)
        if self.text.endswith(('\n', '\r')) or not self.text:
            text += self._newline
        if not text == self.text:
            self.text = text
            self.edited = True

    def _set_title(self, edit: SetTitleCmd):
        lines = self._lines()
        for i, line in enumerate(lines):
            if TITLE_RE.match(line):
                lines[i] = f'# {edit.value}'
                break
        else:
            lines[0:0] = [f'# {edit.value}', ''] if lines else [f'# {edit.value}']
        self._update(lines)

    def _set_last_updated(self, edit: SetLastUpdatedCmd):
        lines = self._lines()
        label_re = _label_re(LAST_UPDATED_LABEL)
        for i, line in enumerate(lines):
            match = label_re.search(line)
            if match:
                lines[i] = f'{line[:match.start(1)]}{edit.value}'
                self._update(lines)
                return
        newline = f'**{LAST_UPDATED_LABEL}:** {edit.value}'
        for label in (STARTED_LABEL, DATE_LABEL):
            label_re = _label_re(label)
            for i, line in enumerate(lines):
                if label_re.search(line):
                    lines.insert(i + 1, newline)
                    self._update(lines)
                    return
        for i, line in enumerate(lines):
            if TITLE_RE.match(line):
                lines[i + 1:i + 1] = ['', newline]
                break
        else:
            lines[0:0] = [newline, '']
        self._update(lines)

    def _add_item(self, edit: AddItemCmd):
        lines = self._lines()
        self._insert_item(lines, edit.value.strip(), edit.completed)
        self._update(lines)

    def _complete_item(self, edit: CompleteItemCmd):
        lines = self._lines()
        value = edit.value.strip()
        span = _section_span(lines, IN_PROGRESS)
        if span is None:
            return
        for i in range(span[0] + 1, span[1]):
            match = UNCHECKED_RE.match(lines[i])
            if match and (match.group(1) or '').strip() == value:
                del lines[i]
                break
        else:
            return
        self._insert_item(lines, value, completed=True)
        self._update(lines)

    @staticmethod
    def _insert_item(lines: List[str], value: str, completed: bool):
        section, item_re = (COMPLETED, CHECKED_RE) if completed else (IN_PROGRESS, UNCHECKED_RE)
        line = f'- [x] {value}' if completed else f'- [ ] {value}'
        span = _section_span(lines, section)
        if span is None:
            while lines and not lines[-1].strip():
                lines.pop()
            if lines:
                lines.append('')
            lines.extend([f'### {section}', line])
            return
        start, end = span
        if value in _extract_items(lines[start + 1:end], item_re):
            return
        pos = start + 1
        for i in range(start + 1, end):
            if lines[i].strip():
                pos = i + 1
        lines.insert(pos, line)
