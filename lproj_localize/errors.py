"""Exception hierarchy for the localization pipeline."""


class LocalizeError(Exception):
    """
    Base exception for every error the pipeline raises on purpose.

    Attributes:
        message: Human-readable error message
        details: Optional extra context (path, folder name, ...)
    """

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self):
        if self.details:
            return f'{self.message} | Details: {self.details}'
        return self.message


class ConfigError(LocalizeError):
    """Raised when a required input is missing or unusable."""


class LocaleFolderError(LocalizeError):
    """Raised when a locale folder name does not carry a language code."""

    def __init__(self, path: str):
        super().__init__('Can not parse language code from locale folder', details=path)
        self.path = path


class TableFileError(LocalizeError):
    """Raised when a table file or locale folder can not be read or written."""

    def __init__(self, path: str, reason: str):
        super().__init__(f'Can not access table: {reason}', details=path)
        self.path = path


class TranslationError(LocalizeError):
    """Raised by providers on network, quota or auth failures."""

    def __init__(self, message: str, provider: str = '', is_rate_limit: bool = False):
        super().__init__(message, details=provider or None)
        self.provider = provider
        self.is_rate_limit = is_rate_limit
