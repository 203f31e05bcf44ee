import os
from pathlib import Path
from sessiondir.files import read_content, write_content, append_content, delete_session, session_exists,\
    get_size, get_title, format_size
from sessiondir.stats import get_stats


def test_write_and_read(fs):
    fs.create_dir('/sessions')
    path = '/sessions/2026-02-01-testid01-session.tmp'
    content = '# Test Session\n\nHello world'
    assert write_content(path, content)
    assert read_content(path) == content


def test_write_preserves_newlines_and_unicode(fs):
    fs.create_dir('/sessions')
    path = '/sessions/s.tmp'
    content = 'café\r\nline two\rline three\n'
    assert write_content(path, content)
    assert read_content(path) == content


def test_write_overwrites(fs):
    fs.create_file('/sessions/s.tmp', contents='old content')
    assert write_content('/sessions/s.tmp', 'new')
    assert read_content('/sessions/s.tmp') == 'new'


def test_write_missing_parent(fs):
    assert not write_content('/nonexistent/deep/path/session.tmp', 'content')
    assert not os.path.exists('/nonexistent/deep/path/session.tmp')
    assert not os.path.exists('/nonexistent')


def test_write_to_directory(fs):
    fs.create_dir('/sessions')
    assert not write_content('/sessions', 'content')


def test_append(fs):
    fs.create_dir('/sessions')
    path = '/sessions/2026-02-01-testid02-session.tmp'
    assert write_content(path, 'Line 1\n')
    assert append_content(path, 'Line 2\n')
    content = read_content(path)
    assert 'Line 1' in content
    assert 'Line 2' in content
    assert content.index('Line 1') < content.index('Line 2')
    assert content == 'Line 1\nLine 2\n'


def test_append_creates_file(fs):
    fs.create_dir('/sessions')
    assert append_content('/sessions/new.tmp', 'B')
    assert read_content('/sessions/new.tmp') == 'B'


def test_append_missing_parent(fs):
    assert not append_content('/nonexistent/session.tmp', 'B')
    assert not os.path.exists('/nonexistent/session.tmp')


def test_read_missing(fs):
    assert read_content('/nonexistent/session.tmp') is None


def test_read_directory(fs):
    fs.create_dir('/sessions')
    assert read_content('/sessions') is None


def test_read_invalid_utf8(fs):
    fs.create_file('/sessions/latin1.tmp', contents='# Caf\xe9 notes\n- [x] done\n'.encode('latin-1'))
    assert read_content('/sessions/latin1.tmp') == '# Caf\ufffd notes\n- [x] done\n'
    assert get_title('/sessions/latin1.tmp') == 'Caf\ufffd notes'
    stats = get_stats('/sessions/latin1.tmp')
    assert stats.completed_items == 1
    assert stats.line_count == 2


def test_write_unencodable_keeps_file(fs):
    fs.create_file('/sessions/a.tmp', contents='# Keep me\n')
    assert not write_content('/sessions/a.tmp', 'new \ud800 text')
    assert read_content('/sessions/a.tmp') == '# Keep me\n'
    assert not append_content('/sessions/a.tmp', 'more \ud800')
    assert read_content('/sessions/a.tmp') == '# Keep me\n'
    assert not write_content('/sessions/a.tmp', None)
    assert read_content('/sessions/a.tmp') == '# Keep me\n'


def test_delete(fs):
    path = '/sessions/test-session.tmp'
    fs.create_file(path, contents='content')
    assert delete_session(path)
    assert not os.path.exists(path)
    assert not session_exists(path)


def test_delete_missing(fs):
    assert not delete_session('/nonexistent/session.tmp')


def test_delete_directory(fs):
    fs.create_dir('/sessions/sub')
    assert not delete_session('/sessions/sub')
    assert os.path.isdir('/sessions/sub')


def test_session_exists(fs):
    fs.create_file('/sessions/test.tmp', contents='content')
    assert session_exists('/sessions/test.tmp')
    assert not session_exists('/nonexistent/path.tmp')
    assert not session_exists('/sessions')
    assert not session_exists(None)


def test_get_size(fs):
    fs.create_file('/sessions/sized.tmp', contents='x' * 2048)
    fs.create_file('/sessions/small.tmp', contents='hi')
    assert 'KB' in get_size('/sessions/sized.tmp')
    assert get_size('/sessions/sized.tmp') == '2.0 KB'
    small = get_size('/sessions/small.tmp')
    assert 'B' in small
    assert 'KB' not in small
    assert small == '2 B'
    assert get_size('/nonexistent/file.tmp') == '0 B'


def test_get_size_directory(fs):
    fs.create_dir('/sessions/2026-02-01-a1b2c3d4-session.tmp')
    assert get_size('/sessions/2026-02-01-a1b2c3d4-session.tmp') == '0 B'
    assert get_size('/sessions') == '0 B'


def test_format_size():
    assert format_size(0) == '0 B'
    assert format_size(1023) == '1023 B'
    assert format_size(1024) == '1.0 KB'
    assert format_size(1536) == '1.5 KB'
    assert format_size(1024 * 1024) == '1.0 MB'
    assert format_size(3 * 1024 ** 3) == '3.0 GB'
    assert format_size(2048 * 1024 ** 4) == '2048.0 TB'


def test_get_title(fs):
    fs.create_file('/sessions/titled.tmp', contents='# My Great Session\n\nSome content')
    fs.create_file('/sessions/empty.tmp', contents='')
    fs.create_file('/sessions/untitled.tmp', contents='## Not a title\nSome content')
    assert get_title('/sessions/titled.tmp') == 'My Great Session'
    assert get_title('/sessions/empty.tmp') == 'Untitled Session'
    assert get_title('/sessions/untitled.tmp') == 'Untitled Session'
    assert get_title('/nonexistent/file.tmp') == 'Untitled Session'


def test_round_trip_through_pathlib(fs):
    fs.create_dir('/sessions')
    assert write_content('/sessions/s.tmp', 'A')
    assert Path('/sessions/s.tmp').read_text() == 'A'
