"""
Exception hierarchy raised by the BAI2 parser and validator.

    Bai2Exception
    ├── ParsingException                  – malformed record (line + field)
    │   ├── UnexpectedRecordCodeException – detail record outside an open group
    │   └── EmptyFileException            – no recognized records at all
    ├── ValidationException               – field-level constraint failure
    │   └── NotSupportedYetException
    └── IntegrityException                – trailer counts/totals disagree
"""


class Bai2Exception(Exception):
    """Base class for every error raised while handling a BAI2 file."""

    def __init__(self, message, line_number=None, field=None):
        super().__init__(message)
        self.message = message
        self.line_number = line_number
        self.field = field


class ParsingException(Bai2Exception):
    """A record could not be parsed.

    When raised from a whole-file parse, ``file`` holds the partially built
    ``Bai2File`` for diagnostics. It must not be treated as valid.
    """

    def __init__(self, message, line_number=None, field=None, file=None):
        super().__init__(message, line_number=line_number, field=field)
        self.file = file


class UnexpectedRecordCodeException(ParsingException):
    pass


class EmptyFileException(ParsingException):
    pass


class ValidationException(Bai2Exception):
    pass


class NotSupportedYetException(ValidationException):
    pass


class IntegrityException(Bai2Exception):
    pass
