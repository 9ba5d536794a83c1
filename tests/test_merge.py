"""Tests for the merge engine."""

import pytest

from lproj_localize.errors import LocaleFolderError
from lproj_localize.merge import MergeEngine
from lproj_localize.model import LineGroup, LocaleFile, LocaleFolder, TextLine
from lproj_localize.patterns import LineKind


def make_group(name, *values, start=1):
    group = LineGroup(name=name, localized_prefix='key')
    for offset, value in enumerate(values):
        group.lines.append(TextLine.entry(name, 'key', start + offset, value))
    return group


def make_folder(lang, *groups):
    path = f'/res/{lang}.lproj'
    locale_file = LocaleFile(path=f'{path}/Localizable.strings', groups=list(groups))
    return LocaleFolder(path=path, files=[locale_file])


def table(folder):
    return folder.files[0]


def pairs(group):
    return [(line.key, line.value) for line in group.entries()]


class TestBaseLocale:

    def test_new_group_added(self):
        folders = [make_folder('en')]
        pending = {'A': make_group('A', 'hello', 'bye')}

        result = MergeEngine('en', 'key').merge(folders, pending)

        assert pairs(table(result.folders[0]).get_group('A')) == [
            ('A.key_1', 'hello'), ('A.key_2', 'bye'),
        ]
        assert result.added == 2

    def test_duplicate_values_share_one_key(self):
        pending = {'A': make_group('A', 'same', 'other', 'same')}

        result = MergeEngine('en', 'key').merge([make_folder('en')], pending)

        assert pairs(table(result.folders[0]).get_group('A')) == [
            ('A.key_1', 'same'), ('A.key_2', 'other'),
        ]

    def test_existing_value_keeps_its_key(self):
        existing = make_group('A', 'hello', 'bye')
        pending = {'A': make_group('A', 'bye', 'hello')}

        result = MergeEngine('en', 'key').merge([make_folder('en', existing)], pending)

        assert pairs(table(result.folders[0]).get_group('A')) == [
            ('A.key_1', 'hello'), ('A.key_2', 'bye'),
        ]
        assert result.added == 0

    def test_new_value_appended_after_highest_index(self):
        existing = LineGroup(name='A', localized_prefix='key', lines=[
            TextLine.entry('A', 'key', 1, 'one'),
            TextLine(kind=LineKind.COMMENT, text='// kept'),
            TextLine.entry('A', 'key', 3, 'three'),
        ])
        pending = {'A': make_group('A', 'three', 'four')}

        result = MergeEngine('en', 'key').merge([make_folder('en', existing)], pending)

        group = table(result.folders[0]).get_group('A')
        assert [line.render() for line in group.lines] == [
            '"A.key_1" = "one";',
            '// kept',
            '"A.key_3" = "three";',
            '"A.key_4" = "four";',
        ]

    def test_entries_without_literal_are_kept(self):
        existing = make_group('A', 'stale', 'hello')
        result = MergeEngine('en', 'key').merge(
            [make_folder('en', existing)], {'A': make_group('A', 'hello')})
        assert pairs(table(result.folders[0]).get_group('A')) == [
            ('A.key_1', 'stale'), ('A.key_2', 'hello'),
        ]

    def test_input_model_not_mutated(self):
        folders = [make_folder('en')]
        MergeEngine('en', 'key').merge(folders, {'A': make_group('A', 'x')})
        assert table(folders[0]).groups == []


class TestOtherLocales:

    def test_same_keys_with_translations(self, fake_translator):
        folders = [make_folder('en'), make_folder('fr')]
        pending = {'A': make_group('A', 'hello', 'bye')}

        result = MergeEngine('en', 'key', fake_translator).merge(folders, pending)

        assert pairs(table(result.folders[1]).get_group('A')) == [
            ('A.key_1', '[fr] hello'), ('A.key_2', '[fr] bye'),
        ]
        assert fake_translator.calls == [(['hello', 'bye'], 'en', 'fr')]
        assert result.translated == 2

    def test_copies_counted_apart_from_additions(self, fake_translator):
        folders = [make_folder('en'), make_folder('fr'), make_folder('de')]

        result = MergeEngine('en', 'key', fake_translator).merge(
            folders, {'A': make_group('A', 'hello', 'bye')})

        assert result.added == 2
        assert result.synced == 4
        assert result.translated == 4

    def test_failed_translation_keeps_base_value(self, failing_translator):
        folders = [make_folder('en'), make_folder('de')]

        result = MergeEngine('en', 'key', failing_translator).merge(
            folders, {'A': make_group('A', 'hello')})

        assert pairs(table(result.folders[1]).get_group('A')) == [('A.key_1', 'hello')]
        assert result.untranslated == 1

    def test_hand_edited_translation_untouched(self, fake_translator):
        folders = [
            make_folder('en', make_group('A', 'hello')),
            make_folder('fr', make_group('A', 'Salut !')),
        ]

        result = MergeEngine('en', 'key', fake_translator).merge(
            folders, {'A': make_group('A', 'hello', 'new')})

        assert pairs(table(result.folders[1]).get_group('A')) == [
            ('A.key_1', 'Salut !'), ('A.key_2', '[fr] new'),
        ]
        assert fake_translator.calls == [(['new'], 'en', 'fr')]

    def test_missing_keys_filled_in_index_order(self, fake_translator):
        folders = [
            make_folder('en', make_group('A', 'one', 'two', 'three')),
            make_folder('fr', LineGroup(name='A', localized_prefix='key', lines=[
                TextLine.entry('A', 'key', 1, 'un'),
                TextLine.entry('A', 'key', 3, 'trois'),
            ])),
        ]

        result = MergeEngine('en', 'key', fake_translator).merge(folders, {})

        assert [key for key, _ in pairs(table(result.folders[1]).get_group('A'))] == [
            'A.key_1', 'A.key_2', 'A.key_3',
        ]

    def test_base_folder_copied_verbatim(self, fake_translator):
        folders = [make_folder('Base'), make_folder('en')]

        result = MergeEngine('en', 'key', fake_translator).merge(
            folders, {'A': make_group('A', 'hello')})

        assert pairs(table(result.folders[0]).get_group('A')) == [('A.key_1', 'hello')]
        assert fake_translator.calls == []

    def test_no_translator_keeps_base_values(self):
        folders = [make_folder('en'), make_folder('ja')]
        result = MergeEngine('en', 'key').merge(folders, {'A': make_group('A', 'hi')})
        assert pairs(table(result.folders[1]).get_group('A')) == [('A.key_1', 'hi')]
        assert result.untranslated == 1

    def test_unnamed_group_stays_first(self):
        head = LineGroup(name=None, localized_prefix='key', lines=[
            TextLine(kind=LineKind.ENTRY, key='ok_button', value='OK'),
        ])
        folders = [make_folder('en', head), make_folder('it', make_group('B', 'b'))]

        result = MergeEngine('en', 'key').merge(folders, {})

        assert [g.name for g in table(result.folders[1]).groups] == [None, 'B']

    def test_bad_folder_name_is_fatal(self):
        folders = [make_folder('en'), LocaleFolder(path='/res/.lproj')]
        with pytest.raises(LocaleFolderError):
            MergeEngine('en', 'key').merge(folders, {'A': make_group('A', 'x')})
