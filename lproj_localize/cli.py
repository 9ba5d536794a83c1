"""
Localizes marker literals of a Swift project into .lproj string tables.

Usage:
  lproj-localize --project ./App --localization ./App/Resources
  lproj-localize --project ./App --localization ./App/Resources --lang en \\
      --translate-service google --translate-key $KEY
  lproj-localize --project ./App --localization ./App/Resources --check
"""

import argparse
import sys

from lproj_localize.config import (
    DEFAULT_BASE_LANG, DEFAULT_LOCALIZED_PREFIX, DEFAULT_METHOD_SUFFIX,
    DEFAULT_SOURCE_EXTENSION, DEFAULT_STRING_PREFIX, DEFAULT_TABLE_EXTENSION,
    DEFAULT_TABLE_NAME, DEFAULT_TRANSLATE_WORKERS, TRANSLATE_KEY_ENV, TRANSLATE_SERVICES,
    LocalizeConfig, log, setup_logging,
)
from lproj_localize.core import LocalizeCore
from lproj_localize.errors import LocalizeError


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='lproj-localize',
        description='Replaces "Loc."-prefixed literals with keys kept in .lproj tables.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Extract, merge and rewrite, no translation
  %(prog)s --project ./App --localization ./App/Resources

  # Translate new entries with Google Cloud Translation
  %(prog)s --project ./App --localization ./App/Resources --translate-service google

  # Only report keys out of sync between locales
  %(prog)s --project ./App --localization ./App/Resources --check
"""
    )

    paths = parser.add_argument_group('paths')
    paths.add_argument('--project', required=True,
                       help='Root of the source tree to scan')
    paths.add_argument('--localization', required=True,
                       help='Folder holding the <lang>.lproj folders')

    keys = parser.add_argument_group('keys')
    keys.add_argument('--lang', default=DEFAULT_BASE_LANG,
                      help=f'Base language code (default: {DEFAULT_BASE_LANG})')
    keys.add_argument('--string-prefix', default=DEFAULT_STRING_PREFIX,
                      help=f'Marker prefix of literals to localize (default: {DEFAULT_STRING_PREFIX})')
    keys.add_argument('--localized-prefix', default=DEFAULT_LOCALIZED_PREFIX,
                      help=f'Prefix of generated key numbers (default: {DEFAULT_LOCALIZED_PREFIX})')
    keys.add_argument('--method', default=DEFAULT_METHOD_SUFFIX,
                      help=f'Member appended to rewritten keys (default: {DEFAULT_METHOD_SUFFIX})')
    keys.add_argument('--source-extension', default=DEFAULT_SOURCE_EXTENSION,
                      help=f'Source file extension (default: {DEFAULT_SOURCE_EXTENSION})')
    keys.add_argument('--table-extension', default=DEFAULT_TABLE_EXTENSION,
                      help=f'Table file extension (default: {DEFAULT_TABLE_EXTENSION})')
    keys.add_argument('--table-name', default=DEFAULT_TABLE_NAME,
                      help=f'Table created when none exists (default: {DEFAULT_TABLE_NAME})')

    translation = parser.add_argument_group('translation')
    translation.add_argument('--translate-service', choices=TRANSLATE_SERVICES, default='none',
                             help='Translation service for non-base locales (default: none)')
    translation.add_argument('--translate-key', default='',
                             help=f'Service API key (or set {TRANSLATE_KEY_ENV})')
    translation.add_argument('--translate-api', default=None,
                             help='Override the service endpoint URL')
    translation.add_argument('--translate-email', default=None,
                             help='Contact email for MyMemory quotas')
    translation.add_argument('--no-fallback', action='store_true',
                             help='Do not fall back to keyless providers')
    translation.add_argument('--workers', type=int, default=DEFAULT_TRANSLATE_WORKERS,
                             help=f'Parallel translation requests (default: {DEFAULT_TRANSLATE_WORKERS})')

    parser.add_argument('--check', action='store_true',
                        help='Only compare keys across locales and exit')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Debug output on the console')
    parser.add_argument('--log-file', default=None,
                        help='Also write a debug log to this file')

    return parser.parse_args(argv)


def config_from_args(args) -> LocalizeConfig:
    return LocalizeConfig(
        project_path=args.project,
        localization_path=args.localization,
        base_lang=args.lang,
        string_prefix=args.string_prefix,
        localized_prefix=args.localized_prefix,
        method_suffix=args.method,
        translate_service=args.translate_service,
        translate_key=args.translate_key,
        translate_api=args.translate_api,
        translate_email=args.translate_email,
        free_fallback=not args.no_fallback,
        translate_workers=args.workers,
        source_extension=args.source_extension,
        table_extension=args.table_extension,
        default_table_name=args.table_name,
    )


def main(argv=None):
    args = parse_args(argv)
    setup_logging(verbose=args.verbose, log_file=args.log_file)
    config = config_from_args(args)

    print("=" * 60)
    print(f"Project:      {config.project_path}")
    print(f"Localization: {config.localization_path}")
    print(f"Base lang:    {config.base_lang}")
    print(f"Translation:  {config.translate_service}")
    print("=" * 60)

    try:
        if args.check:
            gaps = LocalizeCore(config, translator=None).check()
            print(f"{len(gaps)} key(s) out of sync")
            return 1 if gaps else 0

        report = LocalizeCore(config).run()
    except LocalizeError as e:
        log.error(f'[CLI] {e}')
        return 1

    print(f"Literals found:     {report.literals}")
    print(f"Entries added:      {report.added}")
    print(f"Entries synced:     {report.synced}")
    print(f"Translated:         {report.translated}")
    print(f"Untranslated:       {report.untranslated}")
    print(f"Tables written:     {report.tables_written}")
    print(f"Literals replaced:  {report.replaced} in {len(report.files_rewritten)} file(s)")
    if report.unresolved:
        print(f"Left unchanged:     {report.unresolved}")
    if report.gaps:
        print(f"Keys out of sync before run: {len(report.gaps)}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
