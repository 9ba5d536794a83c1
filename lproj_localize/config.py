"""Centralized settings and logging for the localization pipeline."""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from lproj_localize.errors import ConfigError

# Defaults used by the CLI
DEFAULT_BASE_LANG = 'en'
DEFAULT_STRING_PREFIX = 'Loc'
DEFAULT_LOCALIZED_PREFIX = 'key'
DEFAULT_METHOD_SUFFIX = 'localized'
DEFAULT_SOURCE_EXTENSION = '.swift'
DEFAULT_TABLE_EXTENSION = '.strings'
DEFAULT_TABLE_NAME = 'Localizable.strings'
DEFAULT_TRANSLATE_WORKERS = 4

LOCALE_FOLDER_SUFFIX = '.lproj'

# Directories never scanned for source files
IGNORED_DIRS = ('.git', '.build', 'build', 'DerivedData', 'Pods', 'Carthage', 'node_modules')

# Translation services understood by build_engine()
TRANSLATE_SERVICES = ('google', 'google_free', 'deepl', 'mymemory', 'none')

# Environment
TRANSLATE_KEY_ENV = 'LOCALIZE_TRANSLATE_KEY'
LOG_FILE_ENV = 'LOCALIZE_LOG_FILE'


@dataclass
class LocalizeConfig:
    """Inputs of one pipeline run."""

    project_path: str
    localization_path: str
    base_lang: str = DEFAULT_BASE_LANG
    string_prefix: str = DEFAULT_STRING_PREFIX
    localized_prefix: str = DEFAULT_LOCALIZED_PREFIX
    method_suffix: str = DEFAULT_METHOD_SUFFIX
    translate_service: str = 'none'
    translate_key: str = ''
    translate_api: Optional[str] = None
    translate_email: Optional[str] = None
    free_fallback: bool = True
    translate_workers: int = DEFAULT_TRANSLATE_WORKERS
    source_extension: str = DEFAULT_SOURCE_EXTENSION
    table_extension: str = DEFAULT_TABLE_EXTENSION
    default_table_name: str = DEFAULT_TABLE_NAME

    def __post_init__(self):
        self.project_path = os.path.abspath(os.path.expanduser(self.project_path))
        self.localization_path = os.path.abspath(os.path.expanduser(self.localization_path))
        if not self.translate_key:
            self.translate_key = os.environ.get(TRANSLATE_KEY_ENV, '')

    def validate(self):
        """Raise ConfigError for inputs the pipeline can not work with."""
        if not os.path.isdir(self.project_path):
            raise ConfigError('Project path not found', details=self.project_path)
        for name in ('base_lang', 'string_prefix', 'localized_prefix', 'method_suffix'):
            if not getattr(self, name):
                raise ConfigError(f'Empty value for {name}')
        if self.translate_service not in TRANSLATE_SERVICES:
            raise ConfigError('Unknown translation service', details=self.translate_service)
        if self.translate_service in ('google', 'deepl') and not self.translate_key:
            raise ConfigError(
                f'Service {self.translate_service} requires a key '
                f'(--translate-key or {TRANSLATE_KEY_ENV})'
            )
        if self.translate_workers < 1:
            raise ConfigError('translate_workers must be >= 1')


# ============================================================================
# Logging
# ============================================================================

LOG_FORMAT = '[%(asctime)s] %(levelname)s %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """Configure console logging plus an optional log file."""
    fmt = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root = logging.getLogger('lproj-localize')
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    # Console
    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    # File
    log_file = log_file or os.environ.get(LOG_FILE_ENV)
    if log_file:
        fh = logging.FileHandler(log_file, encoding='utf-8')
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    return root


log = setup_logging()
