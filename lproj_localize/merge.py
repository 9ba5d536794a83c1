"""
Merge engine: folds one run's pending groups into the locale tables.

The base locale is merged by value: a pending literal whose text already
exists in its group reuses that entry's key, anything else is appended at
the next index. Every other locale then follows the base tables by key, so
all locales carry the same keys. Existing entries are never moved, changed
or removed.
"""

import copy
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from lproj_localize.config import log
from lproj_localize.errors import ConfigError
from lproj_localize.model import LineGroup, LocaleFile, LocaleFolder, TextLine

# Xcode's development-language folder: gets base values without translation
BASE_FOLDER_LANG = 'Base'


@dataclass
class MergeResult:
    folders: List[LocaleFolder]
    added: int = 0
    synced: int = 0
    translated: int = 0
    untranslated: int = 0


class MergeEngine:

    def __init__(self, base_lang: str, localized_prefix: str, translator=None):
        self.base_lang = base_lang
        self.localized_prefix = localized_prefix
        self.translator = translator

    def merge(self, folders: List[LocaleFolder], pending: Dict[str, LineGroup]) -> MergeResult:
        """Returns merged copies of folders; the input model is left untouched."""
        folders = copy.deepcopy(folders)
        # Bad folder names are fatal, before anything is merged
        langs = [folder.lang for folder in folders]

        base = self.find_base_folder(folders)
        result = MergeResult(folders=folders)

        for locale_file in base.files:
            for group in pending.values():
                result.added += self._merge_by_value(locale_file, group)

        for folder, lang in zip(folders, langs):
            if folder is base:
                continue
            marked = []
            for locale_file in folder.files:
                reference = base.get_file(locale_file.name)
                if reference is not None:
                    marked.extend(self._sync_keys(locale_file, reference))
            result.synced += len(marked)

            if marked and lang not in (self.base_lang, BASE_FOLDER_LANG):
                self._translate_lines(marked, lang, result)

        log.info(
            f'[MERGE] {result.added} entries added, {result.synced} copied to other locales, '
            f'{result.translated} translated, '
            f'{result.untranslated} kept in {self.base_lang}'
        )
        return result

    def find_base_folder(self, folders: List[LocaleFolder]) -> LocaleFolder:
        for folder in folders:
            if folder.lang == self.base_lang:
                return folder
        raise ConfigError(f'No locale folder for base language {self.base_lang}')

    def _merge_by_value(self, locale_file: LocaleFile, pending_group: LineGroup) -> int:
        group = locale_file.get_group(pending_group.name)
        if group is None:
            group = LineGroup(name=pending_group.name, localized_prefix=self.localized_prefix)
            locale_file.add_group(group)
            log.debug(f'[MERGE] {locale_file.path}: new group {group.name}')

        added = 0
        for line in pending_group.entries():
            # First existing match wins, including entries added just before
            if group.find_by_value(line.value) is not None:
                continue
            new_line = group.add_next_line(line.value)
            added += 1
            log.debug(f'[MERGE] {locale_file.path}: + {new_line.key}')
        return added

    def _sync_keys(self, locale_file: LocaleFile, reference: LocaleFile) -> List[TextLine]:
        """Copies every reference entry whose key the file lacks; returns the copies."""
        added = []
        for ref_group in reference.groups:
            group = locale_file.get_group(ref_group.name)
            if group is None:
                group = LineGroup(name=ref_group.name, localized_prefix=self.localized_prefix)
                if group.name is None:
                    # The unnamed group must stay ahead of every MARK section
                    locale_file.groups.insert(0, group)
                else:
                    locale_file.add_group(group)

            for ref_line in ref_group.entries():
                if group.find_by_key(ref_line.key) is None:
                    new_line = replace(ref_line)
                    group.insert_in_order(new_line)
                    added.append(new_line)
        return added

    def _translate_lines(self, lines: List[TextLine], lang: str, result: MergeResult):
        if self.translator is None:
            result.untranslated += len(lines)
            return

        translations: List[Optional[str]] = self.translator.translate_batch(
            [line.value for line in lines], self.base_lang, lang
        )
        for line, translated in zip(lines, translations):
            if translated:
                line.value = translated
                result.translated += 1
            else:
                log.warning(f'[MERGE] {lang}: no translation for {line.key}, keeping base value')
                result.untranslated += 1
