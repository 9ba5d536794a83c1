"""Finds marker literals in the source tree and groups them per source file."""

import os
import re
from typing import Dict, Iterator, List, Optional, Tuple

from lproj_localize.config import IGNORED_DIRS, LOCALE_FOLDER_SUFFIX, log
from lproj_localize.model import LineGroup
from lproj_localize.patterns import find_markers, parse_localized_key

_UNSAFE_KEY_CHARS = re.compile(r'[^A-Za-z0-9_]')


def make_group_name(relative_path: str, source_extension: str) -> str:
    """'App/Views/Login View.swift' -> 'App_Views_Login_View'."""
    if relative_path.endswith(source_extension):
        relative_path = relative_path[:-len(source_extension)]
    return _UNSAFE_KEY_CHARS.sub('_', relative_path)


def iter_source_files(project_path: str, localization_path: str,
                      source_extension: str) -> Iterator[Tuple[str, str]]:
    """
    Yields (absolute path, path relative to the real project root) in sorted
    order, skipping the localization root, .lproj folders and tool dirs.
    """
    root = os.path.realpath(project_path)
    skip_root = os.path.realpath(localization_path)

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames
            if d not in IGNORED_DIRS
            and not d.endswith(LOCALE_FOLDER_SUFFIX)
            and os.path.realpath(os.path.join(dirpath, d)) != skip_root
        )
        for filename in sorted(filenames):
            if not filename.endswith(source_extension):
                continue
            file_path = os.path.join(dirpath, filename)
            yield file_path, os.path.relpath(file_path, root)


def read_source_lines(path: str) -> Optional[List[str]]:
    """Lines with their original endings, or None when the file can not be read as UTF-8."""
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            return f.read().splitlines(keepends=True)
    except UnicodeDecodeError:
        log.warning(f'[SCAN] Skipping non UTF-8 file: {path}')
        return None
    except OSError as e:
        log.warning(f'[SCAN] Skipping unreadable file {path}: {e}')
        return None


def find_source_markers(body: str, string_prefix: str, localized_prefix: str,
                        group_name: str) -> List[re.Match]:
    """
    Marker literals on a source line, minus references to keys of the
    file's own group. With a root file named like the string prefix
    (Loc.swift, prefix "Loc") a rewritten "Loc.key_1" looks like a marker.
    """
    markers = []
    for match in find_markers(body, string_prefix):
        parsed = parse_localized_key(f'{string_prefix}.{match.group(1)}', localized_prefix)
        if parsed and parsed[0] == group_name:
            continue
        markers.append(match)
    return markers


def split_line_ending(line: str) -> Tuple[str, str]:
    body = line.rstrip('\r\n')
    return body, line[len(body):]


def scan_source_tree(project_path: str, localization_path: str, string_prefix: str,
                     localized_prefix: str, source_extension: str) -> Dict[str, LineGroup]:
    """
    Collects every marker literal into a pending group named after its file.
    Indices restart at 1 each run and duplicates each get an entry;
    reconciling with existing keys is the merge engine's job.
    """
    pending: Dict[str, LineGroup] = {}
    literal_count = 0

    for file_path, relative_path in iter_source_files(project_path, localization_path,
                                                      source_extension):
        lines = read_source_lines(file_path)
        if lines is None:
            continue

        name = make_group_name(relative_path, source_extension)
        for raw in lines:
            body, _ = split_line_ending(raw)
            for match in find_source_markers(body, string_prefix, localized_prefix, name):
                if name not in pending:
                    pending[name] = LineGroup(name=name, localized_prefix=localized_prefix)
                pending[name].add_next_line(match.group(1))
                literal_count += 1

    log.info(f'[SCAN] {literal_count} marked literal(s) in {len(pending)} file(s)')
    return pending
