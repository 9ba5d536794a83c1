"""Tests for reading and writing .lproj tables."""

import os

import pytest

from lproj_localize.errors import LocaleFolderError, TableFileError
from lproj_localize.model import LineGroup, LocaleFile, TextLine
from lproj_localize.patterns import LineKind
from lproj_localize.tables import (
    ensure_table_layout, parse_table_lines, read_locale_file, read_locale_folders,
    write_locale_file, write_locale_folders,
)

from conftest import read, write


def deny_listdir(monkeypatch, denied):
    """os.listdir fails for one directory, as it does without read permission."""
    real_listdir = os.listdir

    def listdir(path='.'):
        if os.path.abspath(str(path)) == os.path.abspath(str(denied)):
            raise PermissionError(13, 'Permission denied', str(path))
        return real_listdir(path)

    monkeypatch.setattr(os, 'listdir', listdir)


CANONICAL = (
    '/* Header */\n'
    '"ok_button" = "OK";\n'
    '\n'
    '// MARK: App_ViewController\n'
    '"App_ViewController.key_1" = "Hello";\n'
    '// a note\n'
    '"App_ViewController.key_2" = "Bye";\n'
    '\n'
    '// MARK: App_Settings\n'
    '"App_Settings.key_1" = "Settings";\n'
)


class TestParse:

    def test_groups_follow_marks(self):
        locale_file = parse_table_lines(CANONICAL.splitlines(), 'x.strings', 'key')
        assert [g.name for g in locale_file.groups] == [None, 'App_ViewController', 'App_Settings']

    def test_entries_keep_key_parts(self):
        locale_file = parse_table_lines(CANONICAL.splitlines(), 'x.strings', 'key')
        line = locale_file.get_group('App_ViewController').find_by_value('Bye')
        assert line.key == 'App_ViewController.key_2'
        assert line.clear_key == 'App_ViewController'
        assert line.index == 2

    def test_hand_written_keys_have_no_index(self):
        locale_file = parse_table_lines(CANONICAL.splitlines(), 'x.strings', 'key')
        line = locale_file.get_group(None).find_by_key('ok_button')
        assert line.value == 'OK'
        assert line.index is None

    def test_comments_kept_in_place(self):
        locale_file = parse_table_lines(CANONICAL.splitlines(), 'x.strings', 'key')
        kinds = [line.kind for line in locale_file.get_group('App_ViewController').lines]
        assert kinds == [LineKind.ENTRY, LineKind.COMMENT, LineKind.ENTRY]

    def test_repeated_mark_reopens_group(self):
        lines = [
            '// MARK: A', '"A.key_1" = "one";',
            '// MARK: B', '"B.key_1" = "two";',
            '// MARK: A', '"A.key_2" = "three";',
        ]
        locale_file = parse_table_lines(lines, 'x.strings', 'key')
        assert [g.name for g in locale_file.groups] == ['A', 'B']
        assert locale_file.get_group('A').keys() == ['A.key_1', 'A.key_2']

    def test_render_is_canonical(self):
        locale_file = parse_table_lines(CANONICAL.splitlines(), 'x.strings', 'key')
        assert locale_file.render() == CANONICAL

    def test_extra_blank_lines_are_normalized(self):
        messy = '\n\n// MARK: A\n\n\n"A.key_1" = "one";\n\n\n\n'
        locale_file = parse_table_lines(messy.splitlines(), 'x.strings', 'key')
        assert locale_file.render() == '// MARK: A\n"A.key_1" = "one";\n'


class TestReadFolders:

    def test_missing_root_gives_empty_model(self, tmp_path):
        assert read_locale_folders(str(tmp_path / 'nope'), 'key', '.strings') == []

    def test_reads_lproj_folders_only(self, tmp_path):
        write(str(tmp_path / 'en.lproj' / 'Localizable.strings'), CANONICAL)
        write(str(tmp_path / 'fr.lproj' / 'Localizable.strings'), '')
        write(str(tmp_path / 'fr.lproj' / 'Plurals.stringsdict'), '<plist/>')
        write(str(tmp_path / 'Assets' / 'Other.strings'), '')

        folders = read_locale_folders(str(tmp_path), 'key', '.strings')

        assert [f.name for f in folders] == ['en.lproj', 'fr.lproj']
        assert [f.name for f in folders[1].files] == ['Localizable.strings']
        assert folders[0].files[0].keys()[0] == 'ok_button'

    def test_utf16_table(self, tmp_path):
        path = tmp_path / 'Localizable.strings'
        path.write_bytes('"a.key_1" = "Grüße";\n'.encode('utf-16'))
        locale_file = read_locale_file(str(path), 'key')
        assert locale_file.groups[0].lines[0].value == 'Grüße'

    def test_unreadable_root_gives_empty_model(self, tmp_path, monkeypatch):
        write(str(tmp_path / 'en.lproj' / 'Localizable.strings'), CANONICAL)
        deny_listdir(monkeypatch, tmp_path)
        assert read_locale_folders(str(tmp_path), 'key', '.strings') == []

    def test_unreadable_locale_folder_raises(self, tmp_path, monkeypatch):
        write(str(tmp_path / 'en.lproj' / 'Localizable.strings'), CANONICAL)
        deny_listdir(monkeypatch, tmp_path / 'en.lproj')
        with pytest.raises(TableFileError) as exc_info:
            read_locale_folders(str(tmp_path), 'key', '.strings')
        assert exc_info.value.path == str(tmp_path / 'en.lproj')

    def test_undecodable_table_raises(self, tmp_path):
        # Invalid UTF-8, odd length for UTF-16
        path = tmp_path / 'Localizable.strings'
        path.write_bytes(b'"k" = "\xc3(x";\n')
        with pytest.raises(TableFileError, match='neither UTF-8 nor UTF-16'):
            read_locale_file(str(path), 'key')


class TestEnsureLayout:

    def test_creates_base_folder_with_default_table(self, tmp_path):
        folders = ensure_table_layout([], str(tmp_path), 'en', 'Localizable.strings')
        assert len(folders) == 1
        assert folders[0].lang == 'en'
        assert folders[0].files[0].path == os.path.join(
            str(tmp_path), 'en.lproj', 'Localizable.strings')

    def test_every_folder_gets_every_table(self, tmp_path):
        write(str(tmp_path / 'en.lproj' / 'Localizable.strings'), '')
        write(str(tmp_path / 'en.lproj' / 'InfoPlist.strings'), '')
        os.makedirs(str(tmp_path / 'fr.lproj'))
        folders = read_locale_folders(str(tmp_path), 'key', '.strings')

        ensure_table_layout(folders, str(tmp_path), 'en', 'Localizable.strings')

        fr = folders[1]
        assert sorted(f.name for f in fr.files) == ['InfoPlist.strings', 'Localizable.strings']

    def test_bad_folder_name_is_fatal(self, tmp_path):
        os.makedirs(str(tmp_path / '.lproj'))
        folders = read_locale_folders(str(tmp_path), 'key', '.strings')
        with pytest.raises(LocaleFolderError):
            ensure_table_layout(folders, str(tmp_path), 'en', 'Localizable.strings')


class TestWrite:

    def test_write_creates_folders(self, tmp_path):
        group = LineGroup(name='A', localized_prefix='key')
        group.lines.append(TextLine.entry('A', 'key', 1, 'one'))
        path = str(tmp_path / 'de.lproj' / 'Localizable.strings')

        write_locale_file(LocaleFile(path=path, groups=[group]))

        assert read(path) == '// MARK: A\n"A.key_1" = "one";\n'

    def test_rewrite_is_byte_identical(self, tmp_path):
        write(str(tmp_path / 'en.lproj' / 'Localizable.strings'), CANONICAL + '\n\n\n')
        folders = read_locale_folders(str(tmp_path), 'key', '.strings')
        write_locale_folders(folders)
        first = read(str(tmp_path / 'en.lproj' / 'Localizable.strings'))

        write_locale_folders(read_locale_folders(str(tmp_path), 'key', '.strings'))

        assert first == CANONICAL
        assert read(str(tmp_path / 'en.lproj' / 'Localizable.strings')) == first

    def test_empty_table_stays_empty(self, tmp_path):
        path = str(tmp_path / 'en.lproj' / 'Localizable.strings')
        write_locale_file(LocaleFile(path=path))
        assert read(path) == ''

    def test_write_failure_raises(self, tmp_path):
        write(str(tmp_path / 'blocker'), '')
        path = str(tmp_path / 'blocker' / 'en.lproj' / 'Localizable.strings')
        with pytest.raises(TableFileError):
            write_locale_file(LocaleFile(path=path))
