"""Second pass over the sources: replaces marker literals with key references."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from lproj_localize.config import DEFAULT_LOCALIZED_PREFIX, log
from lproj_localize.errors import LocalizeError
from lproj_localize.model import LocaleFolder
from lproj_localize.scanner import (
    find_source_markers, iter_source_files, make_group_name, read_source_lines,
    split_line_ending,
)


@dataclass
class RewriteResult:
    files: List[str] = field(default_factory=list)
    replaced: int = 0
    unresolved: int = 0


def find_localized_key(base_folder: LocaleFolder, group_name: str, value: str) -> Optional[str]:
    """Key of the first entry with this value in the first group with this name."""
    for locale_file in base_folder.files:
        group = locale_file.get_group(group_name)
        if group is None:
            continue
        line = group.find_by_value(value)
        return line.key if line else None
    return None


def rewrite_line(body: str, string_prefix: str, method_suffix: str,
                 base_folder: LocaleFolder, group_name: str,
                 localized_prefix: str = DEFAULT_LOCALIZED_PREFIX) -> Tuple[str, int, int]:
    """
    Replaces every resolvable marker on the line.
    Returns (new body, replaced, unresolved); unresolved literals stay as written.
    """
    pieces = []
    pos = 0
    replaced = unresolved = 0

    for match in find_source_markers(body, string_prefix, localized_prefix, group_name):
        key = find_localized_key(base_folder, group_name, match.group(1))
        if key is None:
            unresolved += 1
            continue
        pieces.append(body[pos:match.start()])
        pieces.append(f'"{key}".{method_suffix}')
        pos = match.end()
        replaced += 1

    pieces.append(body[pos:])
    return ''.join(pieces), replaced, unresolved


def rewrite_sources(project_path: str, localization_path: str, base_folder: LocaleFolder,
                    string_prefix: str, method_suffix: str, source_extension: str,
                    localized_prefix: str = DEFAULT_LOCALIZED_PREFIX) -> RewriteResult:
    """
    Rebuilds each source file in memory and writes it back only when a
    literal was replaced. Unmatched and unresolved text is kept byte for byte.
    """
    result = RewriteResult()

    for file_path, relative_path in iter_source_files(project_path, localization_path,
                                                      source_extension):
        lines = read_source_lines(file_path)
        if lines is None:
            continue

        group_name = make_group_name(relative_path, source_extension)
        out = []
        changed = 0
        for raw in lines:
            body, ending = split_line_ending(raw)
            new_body, replaced, unresolved = rewrite_line(
                body, string_prefix, method_suffix, base_folder, group_name, localized_prefix
            )
            if unresolved:
                result.unresolved += unresolved
                log.warning(f'[REWRITE] {relative_path}: no key for "{body.strip()}"')
            if replaced:
                out.append(new_body + ending)
                changed += replaced
            else:
                out.append(raw)

        if changed:
            try:
                with open(file_path, 'w', encoding='utf-8', newline='') as f:
                    f.write(''.join(out))
            except OSError as e:
                raise LocalizeError(f'Can not write source file: {e}', details=file_path)
            result.files.append(relative_path)
            result.replaced += changed
            log.info(f'[REWRITE] {relative_path}: {changed} literal(s) replaced')

    return result
