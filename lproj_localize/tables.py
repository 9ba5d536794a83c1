"""Reads .lproj table files into the model and writes the model back."""

import os
from typing import Iterable, List

from lproj_localize.config import LOCALE_FOLDER_SUFFIX, log
from lproj_localize.errors import TableFileError
from lproj_localize.model import LineGroup, LocaleFile, LocaleFolder, TextLine
from lproj_localize.patterns import (
    LineKind, classify_table_line, parse_entry, parse_localized_key, parse_mark,
)


# ============================================================================
# Reader
# ============================================================================

def read_text(path: str) -> str:
    """
    Reads a table file; Xcode tables may be UTF-16, everything we write is UTF-8.
    Raises TableFileError when the file can not be read or decoded, since
    writing the merged model back would drop its content.
    """
    try:
        with open(path, 'rb') as f:
            raw = f.read()
    except OSError as e:
        raise TableFileError(path, str(e))

    try:
        if raw.startswith((b'\xff\xfe', b'\xfe\xff')):
            return raw.decode('utf-16')
        try:
            return raw.decode('utf-8-sig')
        except UnicodeDecodeError:
            log.warning(f'[TABLES] {path} is not UTF-8, trying UTF-16')
            return raw.decode('utf-16')
    except UnicodeDecodeError:
        raise TableFileError(path, 'neither UTF-8 nor UTF-16')


def parse_table_lines(lines: Iterable[str], path: str, localized_prefix: str) -> LocaleFile:
    """
    Builds a LocaleFile from raw table lines.

    A MARK line opens a named group that collects every following line until
    the next MARK. Lines before the first MARK form the unnamed group.
    Blank lines are dropped; the writer puts separators back.
    """
    locale_file = LocaleFile(path=path)
    current = LineGroup(name=None, localized_prefix=localized_prefix)
    head = current

    for raw in lines:
        line = raw.rstrip('\r\n')
        kind = classify_table_line(line)

        if kind == LineKind.BLANK:
            continue

        if kind == LineKind.MARK:
            name = parse_mark(line)
            existing = locale_file.get_group(name)
            if existing is None:
                existing = LineGroup(name=name, localized_prefix=localized_prefix)
                locale_file.add_group(existing)
            current = existing
            continue

        if kind == LineKind.ENTRY:
            key, value = parse_entry(line)
            parsed = parse_localized_key(key, localized_prefix)
            if parsed:
                clear_key, index = parsed
                current.lines.append(TextLine(kind=kind, key=key, value=value,
                                              clear_key=clear_key, index=index))
            else:
                current.lines.append(TextLine(kind=kind, key=key, value=value))
            continue

        current.lines.append(TextLine(kind=kind, text=line.rstrip()))

    if head.lines:
        locale_file.groups.insert(0, head)
    return locale_file


def read_locale_file(path: str, localized_prefix: str) -> LocaleFile:
    return parse_table_lines(read_text(path).splitlines(), path, localized_prefix)


def read_locale_folders(localization_path: str, localized_prefix: str,
                        table_extension: str) -> List[LocaleFolder]:
    """
    Loads every <lang>.lproj folder under localization_path.
    A missing or unreadable root yields an empty model so a first run can
    bootstrap tables. An unreadable locale folder raises TableFileError.
    """
    if not os.path.isdir(localization_path):
        log.warning(f'[TABLES] Localization path not found, starting empty: {localization_path}')
        return []

    try:
        entries = sorted(os.listdir(localization_path))
    except OSError as e:
        log.warning(f'[TABLES] Localization path not readable, starting empty: {e}')
        return []

    folders = []
    for entry in entries:
        folder_path = os.path.join(localization_path, entry)
        if not entry.endswith(LOCALE_FOLDER_SUFFIX) or not os.path.isdir(folder_path):
            continue

        folder = LocaleFolder(path=folder_path)
        try:
            filenames = sorted(os.listdir(folder_path))
        except OSError as e:
            raise TableFileError(folder_path, str(e))
        for filename in filenames:
            file_path = os.path.join(folder_path, filename)
            if filename.endswith(table_extension) and os.path.isfile(file_path):
                folder.add_file(read_locale_file(file_path, localized_prefix))

        log.debug(f'[TABLES] {entry}: {len(folder.files)} table file(s)')
        folders.append(folder)

    return folders


def ensure_table_layout(folders: List[LocaleFolder], localization_path: str,
                        base_lang: str, default_table_name: str) -> List[LocaleFolder]:
    """
    Makes the model complete: a folder for the base language exists and
    every folder carries every table file name known in any folder.
    Raises LocaleFolderError for a folder without a language code.
    """
    langs = [folder.lang for folder in folders]

    table_names = []
    for folder in folders:
        for locale_file in folder.files:
            if locale_file.name not in table_names:
                table_names.append(locale_file.name)
    if not table_names:
        table_names.append(default_table_name)

    if base_lang not in langs:
        base_path = os.path.join(localization_path, base_lang + LOCALE_FOLDER_SUFFIX)
        log.info(f'[TABLES] Creating base locale folder {base_path}')
        folders.insert(0, LocaleFolder(path=base_path))

    for folder in folders:
        for name in table_names:
            if folder.get_file(name) is None:
                log.info(f'[TABLES] {folder.name}: adding missing table {name}')
                folder.add_file(LocaleFile(path=os.path.join(folder.path, name)))

    return folders


# ============================================================================
# Writer
# ============================================================================

def write_locale_file(locale_file: LocaleFile):
    """Overwrites the file with the canonical rendering of its groups."""
    try:
        os.makedirs(os.path.dirname(locale_file.path), exist_ok=True)
        with open(locale_file.path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(locale_file.render())
    except OSError as e:
        raise TableFileError(locale_file.path, str(e))


def write_locale_folders(folders: List[LocaleFolder]) -> int:
    written = 0
    for folder in folders:
        for locale_file in folder.files:
            write_locale_file(locale_file)
            written += 1
        log.debug(f'[TABLES] Wrote {len(folder.files)} table file(s) in {folder.name}')
    return written
