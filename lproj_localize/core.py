"""Pipeline: check -> read -> scan -> merge -> write -> rewrite."""

from dataclasses import dataclass, field
from typing import List

from lproj_localize.checker import KeyGap, check_key_parity
from lproj_localize.config import LocalizeConfig, log
from lproj_localize.engine import build_engine
from lproj_localize.merge import MergeEngine
from lproj_localize.model import LocaleFolder
from lproj_localize.rewriter import rewrite_sources
from lproj_localize.scanner import scan_source_tree
from lproj_localize.tables import ensure_table_layout, read_locale_folders, write_locale_folders

_AUTO = object()


@dataclass
class RunReport:
    gaps: List[KeyGap] = field(default_factory=list)
    literals: int = 0
    added: int = 0
    synced: int = 0
    translated: int = 0
    untranslated: int = 0
    tables_written: int = 0
    files_rewritten: List[str] = field(default_factory=list)
    replaced: int = 0
    unresolved: int = 0


class LocalizeCore:
    """
    One localization run over a project.

    translator defaults to the engine built from the config; tests and
    callers may pass any object with translate_batch(values, source, target),
    or None to disable translation.
    """

    def __init__(self, config: LocalizeConfig, translator=_AUTO):
        self.config = config
        self.translator = build_engine(config) if translator is _AUTO else translator

    def load_tables(self) -> List[LocaleFolder]:
        cfg = self.config
        folders = read_locale_folders(cfg.localization_path, cfg.localized_prefix,
                                      cfg.table_extension)
        return ensure_table_layout(folders, cfg.localization_path, cfg.base_lang,
                                   cfg.default_table_name)

    def check(self) -> List[KeyGap]:
        cfg = self.config
        folders = read_locale_folders(cfg.localization_path, cfg.localized_prefix,
                                      cfg.table_extension)
        return check_key_parity(folders)

    def run(self) -> RunReport:
        cfg = self.config
        cfg.validate()
        report = RunReport()

        # Diagnostic only, runs on the tables as found on disk
        report.gaps = self.check()

        current = self.load_tables()
        pending = scan_source_tree(cfg.project_path, cfg.localization_path, cfg.string_prefix,
                                   cfg.localized_prefix, cfg.source_extension)
        report.literals = sum(len(group.entries()) for group in pending.values())

        merger = MergeEngine(cfg.base_lang, cfg.localized_prefix, self.translator)
        merged = merger.merge(current, pending)
        report.added = merged.added
        report.synced = merged.synced
        report.translated = merged.translated
        report.untranslated = merged.untranslated

        report.tables_written = write_locale_folders(merged.folders)

        rewritten = rewrite_sources(cfg.project_path, cfg.localization_path,
                                    merger.find_base_folder(merged.folders),
                                    cfg.string_prefix, cfg.method_suffix, cfg.source_extension,
                                    cfg.localized_prefix)
        report.files_rewritten = rewritten.files
        report.replaced = rewritten.replaced
        report.unresolved = rewritten.unresolved

        log.info(
            f'[CORE] Done: {report.added} added, {report.tables_written} table(s) written, '
            f'{report.replaced} literal(s) replaced in {len(report.files_rewritten)} file(s)'
        )
        return report
