"""
Error types for the csrun script runner.
"""


class CsrunError(Exception):
    """Base class for errors raised by csrun itself."""


class UsageError(CsrunError):
    """Malformed command line. Reported before any file is touched."""


class ConfigError(CsrunError):
    """The configuration file could not be read or failed validation."""


class ScanError(CsrunError):
    """A source file's leading directive/comment section is malformed."""
    def __init__(self, message, path, line_number, column=1, code="CR1035"):
        self.message = message
        self.path = path
        self.line_number = line_number
        self.column = column
        self.code = code
        super().__init__(self._format_error())

    def _format_error(self):
        """Format the error the same way compiler diagnostics are printed."""
        return f"{self.path}({self.line_number},{self.column}) : error {self.code}: {self.message}"
