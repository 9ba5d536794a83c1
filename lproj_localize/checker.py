"""Cross-locale key comparison. Diagnostic only: reports drift, never changes tables."""

from dataclasses import dataclass
from typing import List

from lproj_localize.config import log
from lproj_localize.model import LocaleFolder


@dataclass(frozen=True)
class KeyGap:
    """A key present in one folder's table but missing from another's."""

    table: str
    key: str
    present_in: str
    missing_from: str


def check_key_parity(folders: List[LocaleFolder]) -> List[KeyGap]:
    """
    Compares the key sets of same-named tables across every pair of folders.
    A folder without the table at all counts as having no keys.
    """
    gaps = []
    table_names = []
    for folder in folders:
        for locale_file in folder.files:
            if locale_file.name not in table_names:
                table_names.append(locale_file.name)

    for table in table_names:
        keys_by_folder = {}
        for folder in folders:
            locale_file = folder.get_file(table)
            keys_by_folder[folder.name] = locale_file.keys() if locale_file else []

        for source in folders:
            for target in folders:
                if source is target:
                    continue
                target_keys = set(keys_by_folder[target.name])
                for key in keys_by_folder[source.name]:
                    if key not in target_keys:
                        gaps.append(KeyGap(table, key, source.name, target.name))

    for gap in gaps:
        log.warning(
            f'[CHECK] {gap.table}: "{gap.key}" is in {gap.present_in} '
            f'but missing from {gap.missing_from}'
        )

    if gaps:
        log.warning(f'[CHECK] {len(gaps)} key(s) out of sync across {len(folders)} locale(s)')
    else:
        log.info(f'[CHECK] Keys in sync across {len(folders)} locale(s)')
    return gaps
