"""In-memory model of the locale tables: folder -> file -> group -> lines."""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from lproj_localize.errors import LocaleFolderError
from lproj_localize.patterns import LineKind, lang_from_folder_name


@dataclass
class TextLine:
    """
    One line of a table file.

    Entry lines carry a key and a value. Keys shaped like
    "<clear_key>.<prefix>_<index>" also carry clear_key/index; hand-written
    keys keep index None. Comment and unrecognized lines keep their raw text.
    """

    kind: LineKind
    key: str = ''
    value: str = ''
    clear_key: str = ''
    index: Optional[int] = None
    text: str = ''

    @classmethod
    def entry(cls, clear_key: str, localized_prefix: str, index: int, value: str) -> 'TextLine':
        return cls(
            kind=LineKind.ENTRY,
            key=make_localized_key(clear_key, localized_prefix, index),
            value=value,
            clear_key=clear_key,
            index=index,
        )

    @property
    def is_entry(self) -> bool:
        return self.kind == LineKind.ENTRY

    def render(self) -> str:
        if self.is_entry:
            return f'"{self.key}" = "{self.value}";'
        return self.text


@dataclass
class LineGroup:
    """Entries that came from one source file. name is None for the unnamed head of a file."""

    name: Optional[str]
    localized_prefix: str
    lines: List[TextLine] = field(default_factory=list)

    def entries(self) -> List[TextLine]:
        return [line for line in self.lines if line.is_entry]

    def keys(self) -> List[str]:
        return [line.key for line in self.lines if line.is_entry]

    def max_index(self) -> int:
        indices = [line.index for line in self.lines if line.is_entry and line.index is not None]
        return max(indices) if indices else 0

    def add_next_line(self, value: str) -> TextLine:
        """Appends an entry with the next index after the current maximum."""
        line = TextLine.entry(self.name, self.localized_prefix, self.max_index() + 1, value)
        self.lines.append(line)
        return line

    def find_by_value(self, value: str) -> Optional[TextLine]:
        for line in self.lines:
            if line.is_entry and line.value == value:
                return line
        return None

    def find_by_key(self, key: str) -> Optional[TextLine]:
        for line in self.lines:
            if line.is_entry and line.key == key:
                return line
        return None

    def insert_in_order(self, new_line: TextLine):
        """Inserts before the first indexed entry with a higher index; existing lines never move."""
        if new_line.index is not None:
            for pos, line in enumerate(self.lines):
                if line.is_entry and line.index is not None and line.index > new_line.index:
                    self.lines.insert(pos, new_line)
                    return
        self.lines.append(new_line)

    def render(self) -> str:
        out = []
        if self.name is not None:
            out.append(f'// MARK: {self.name}')
        out.extend(line.render() for line in self.lines)
        return '\n'.join(out)


@dataclass
class LocaleFile:
    path: str
    groups: List[LineGroup] = field(default_factory=list)

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def get_group(self, name: Optional[str]) -> Optional[LineGroup]:
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def add_group(self, group: LineGroup):
        self.groups.append(group)

    def keys(self) -> List[str]:
        return [key for group in self.groups for key in group.keys()]

    def render(self) -> str:
        """Canonical file text: groups separated by one blank line, single trailing newline."""
        blocks = [group.render() for group in self.groups]
        text = '\n\n'.join(block for block in blocks if block)
        return clean_text(text)


@dataclass
class LocaleFolder:
    path: str
    files: List[LocaleFile] = field(default_factory=list)

    @property
    def name(self) -> str:
        return os.path.basename(self.path.rstrip(os.sep))

    @property
    def lang(self) -> str:
        """Language code from the folder name; raises LocaleFolderError when absent."""
        lang = lang_from_folder_name(self.name)
        if not lang:
            raise LocaleFolderError(self.path)
        return lang

    def get_file(self, name: str) -> Optional[LocaleFile]:
        for locale_file in self.files:
            if locale_file.name == name:
                return locale_file
        return None

    def add_file(self, locale_file: LocaleFile):
        self.files.append(locale_file)


def make_localized_key(clear_key: str, localized_prefix: str, index: int) -> str:
    return f'{clear_key}.{localized_prefix}_{index}'


def clean_text(text: str) -> str:
    """Strips trailing blank content; non-empty text ends with exactly one newline."""
    text = text.rstrip()
    return text + '\n' if text else ''
