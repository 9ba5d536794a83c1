"""
Regex contracts shared by every stage of the pipeline.

Table patterns are anchored to the whole line, so a table line falls into
exactly one LineKind. The marker pattern matches a single literal and is
searched repeatedly, so every marker on a source line is found.
"""

import re
from enum import Enum
from functools import lru_cache
from typing import List, Optional, Tuple

from lproj_localize.config import LOCALE_FOLDER_SUFFIX

# Quoted string body with backslash escapes
_QUOTED_BODY = r'(?:[^"\\]|\\.)'

ENTRY_RE = re.compile(
    r'^\s*"(' + _QUOTED_BODY + r'+)"\s*=\s*"(' + _QUOTED_BODY + r'*)"\s*;.*$'
)
MARK_RE = re.compile(r'^\s*//\s*MARK:\s*(.+?)\s*$')
COMMENT_RE = re.compile(r'^\s*(?://(?!\s*MARK:).*|/\*.*\*/\s*)$')
BLANK_RE = re.compile(r'^\s*$')
FOLDER_NAME_RE = re.compile(r'^(.+)' + re.escape(LOCALE_FOLDER_SUFFIX) + r'$')

# %@, %d, %1$@, %ld, %.2f, %% and Swift interpolation \(expr)
PLACEHOLDER_RE = re.compile(
    r'%(?:\d+\$)?[-+ #0]*\d*(?:\.\d+)?(?:hh|h|ll|l|q|z|t|j)?[@dDuUxXoOfFeEgGcCsSpaA]'
    r'|%%'
    r'|\\\([^)]*\)'
)


class LineKind(Enum):
    ENTRY = 'entry'
    COMMENT = 'comment'
    MARK = 'mark'
    BLANK = 'blank'
    OTHER = 'other'


@lru_cache(maxsize=None)
def marker_pattern(string_prefix: str):
    """Matches one literal "<string_prefix>.<payload>"; group 1 is the payload."""
    return re.compile(
        r'"\s*' + re.escape(string_prefix) + r'\.(' + _QUOTED_BODY + r'+)"'
    )


@lru_cache(maxsize=None)
def localized_key_pattern(localized_prefix: str):
    """Splits "<clear key>.<localized_prefix>_<n>" into clear key and n."""
    return re.compile(r'^(.+)\.' + re.escape(localized_prefix) + r'_(\d+)$')


def classify_table_line(line: str) -> LineKind:
    if BLANK_RE.match(line):
        return LineKind.BLANK
    if MARK_RE.match(line):
        return LineKind.MARK
    if ENTRY_RE.match(line):
        return LineKind.ENTRY
    if COMMENT_RE.match(line):
        return LineKind.COMMENT
    return LineKind.OTHER


def find_markers(line: str, string_prefix: str) -> List[re.Match]:
    """Every marker literal on the line, left to right; match.group(1) is the payload."""
    return list(marker_pattern(string_prefix).finditer(line))


def parse_entry(line: str) -> Optional[Tuple[str, str]]:
    m = ENTRY_RE.match(line)
    if not m:
        return None
    return m.group(1), m.group(2)


def parse_localized_key(key: str, localized_prefix: str) -> Optional[Tuple[str, int]]:
    m = localized_key_pattern(localized_prefix).match(key)
    if not m:
        return None
    return m.group(1), int(m.group(2))


def parse_mark(line: str) -> Optional[str]:
    m = MARK_RE.match(line)
    return m.group(1) if m else None


def lang_from_folder_name(name: str) -> Optional[str]:
    """'fr.lproj' -> 'fr'."""
    m = FOLDER_NAME_RE.match(name)
    return m.group(1) if m else None
