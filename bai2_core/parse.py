"""
parse.py
---------
Record type registry and the hierarchy assembler.

``RecordBuilderFactory`` maps each record code to the model class that parses
it. ``Bai2FileParser`` walks the tokenizer's record stream once, dispatching
each record and assembling the File → Group → details structure:

    ----------------------------------------------------------------
    Record Code | Record Name                       | Purpose
    ----------------------------------------------------------------
             01 | File Header                       | Begins File
             02 | Group Header                      | Begins Group
             03 | Account Identifier                | Begins Account
             16 | Transaction Detail (Optional)     | Within Account
             88 | Continuation                      | Extends previous record
             49 | Account Trailer                   | Ends Account
             98 | Group Trailer                     | Ends Group
             99 | File Trailer                      | Ends File
    ----------------------------------------------------------------
"""
import logging
from enum import Enum

from bai2_core.constants import FIELD_DELIMITER, RecordCode, DETAIL_RECORD_CODES
from bai2_core.exceptions.exceptions import (
    ParsingException, UnexpectedRecordCodeException, EmptyFileException, IntegrityException,
)
from bai2_core.models.bai2_model import (
    Bai2File, Bai2FileHeader, Bai2FileTrailer,
    Group, GroupHeader, GroupTrailer,
    AccountIdentifier, AccountTrailer, TransactionDetail, ContinuationRecord,
)
from bai2_core.utils.bai2_helper import IteratorHelper, DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)


RecordBuilderFactory = {
    RecordCode.file_header: Bai2FileHeader,
    RecordCode.file_trailer: Bai2FileTrailer,
    RecordCode.group_header: GroupHeader,
    RecordCode.group_trailer: GroupTrailer,
    RecordCode.account_identifier: AccountIdentifier,
    RecordCode.account_trailer: AccountTrailer,
    RecordCode.transaction_detail: TransactionDetail,
    RecordCode.continuation: ContinuationRecord,
}


def construct(code):
    """Return an empty record for ``code``, or None for codes this parser ignores."""
    try:
        record_code = RecordCode(code)
    except ValueError:
        return None
    return RecordBuilderFactory[record_code]()


def normalize_line(line):
    """
    Strip line breaks and re-slice the line so its record code sits at offset 0.

    Returns None for noise: lines without a comma far enough in to carry a code.
    """
    line = line.replace('\r\n', '').replace('\n', '')
    index = line.find(FIELD_DELIMITER)
    if index < 2:
        return None
    return line[index - 2:]


class ParserState(Enum):
    idle = 'idle'
    file_open = 'file-open'
    group_open = 'group-open'
    done = 'done'


class Bai2FileParser:
    """
    Assembles a ``Bai2File`` from a stream in a single forward pass.

    A parser instance holds the scanning state (line number, current group,
    state) for one parse and must not be reused.
    """

    def __init__(self, source, strict=False, chunk_size=DEFAULT_CHUNK_SIZE, encoding='utf-8'):
        """
        Args:
            source: A text or binary stream, a string or bytes.
            strict: Raise instead of dropping a group that has no group trailer.
            chunk_size: Number of characters (or bytes) read at a time.
            encoding: Encoding used when the source yields bytes.
        """
        self._records = IteratorHelper(source, chunk_size=chunk_size, encoding=encoding)
        self.strict = strict
        self.file = Bai2File()
        self.state = ParserState.idle
        self.group = None
        self.line_number = 0
        self._owner_index = None
        self._owner_line_number = None
        self._has_block = False

    def parse(self):
        """
        Parse the whole stream.

        Returns:
            The assembled Bai2File.

        Raises:
            ParsingException: On the first malformed or misplaced record. The
                exception's ``file`` holds the partially built file.
            EmptyFileException: If the stream holds no recognized record.
        """
        logger.info("Parsing BAI2 file...")
        try:
            for line_number, text in self._records:
                self.line_number = line_number
                self._handle(text)
        except ParsingException as e:
            if e.file is None:
                e.file = self.file
            raise

        if not self._has_block:
            raise EmptyFileException('invalid file format: no BAI2 records found')

        self._close_dangling_group()

        logger.info(f"Parsed BAI2 file with {len(self.file.groups)} groups")
        return self.file

    def _handle(self, text):
        line = normalize_line(text)
        if line is None:
            return

        record = construct(line[:2])
        if record is None:
            logger.debug(f"Skipping unrecognized record code {line[:2]!r} on line {self.line_number}")
            return

        try:
            record.parse(line)
        except ParsingException as e:
            raise ParsingException(
                f'Error parsing {record.name} on line {self.line_number}: {e}',
                line_number=self.line_number,
                field=e.field,
                file=self.file,
            ) from e

        logger.debug(f"Line {self.line_number}: {record.name}")
        self._transition(record)
        self._has_block = True

    def _transition(self, record):
        if record.code == RecordCode.file_header:
            self._close_dangling_group()
            self.file.header = record
            self.state = ParserState.file_open

        elif record.code == RecordCode.group_header:
            self._close_dangling_group()
            self.group = Group(header=record)
            self._owner_index = None
            self.state = ParserState.group_open

        elif record.code in DETAIL_RECORD_CODES:
            self._require_open_group(record)
            if isinstance(record, ContinuationRecord):
                record.owner_index = self._owner_index
            else:
                self._check_owner()
                self._owner_index = len(self.group.details)
                self._owner_line_number = self.line_number
            self.group.details.append(record)

        elif record.code == RecordCode.group_trailer:
            self._require_open_group(record)
            self._check_owner()
            self.group.trailer = record
            self.file.groups.append(self.group)
            self.group = None
            self.state = ParserState.file_open

        elif record.code == RecordCode.file_trailer:
            self._close_dangling_group()
            self.file.trailer = record
            self.state = ParserState.done

    def _require_open_group(self, record):
        if self.state != ParserState.group_open:
            raise UnexpectedRecordCodeException(
                f'Unexpected {record.name} (code {record.code.value}) on line {self.line_number}: '
                f'no group is open',
                line_number=self.line_number,
                file=self.file,
            )

    def _close_dangling_group(self):
        """Handle a group that ends without its group trailer."""
        if self.group is None:
            return
        self._check_owner()

        message = (
            f'Group {self.group.header.originator_id!r} has no group trailer '
            f'(before line {self.line_number})'
        )
        self.group = None
        if self.strict:
            raise IntegrityException(message, line_number=self.line_number)
        logger.warning(f"{message}; dropping it")

    def _check_owner(self):
        """
        Fail on a transaction detail whose availability schedule is still
        incomplete once all of its continuation records have been read.
        """
        if self.group is None or self._owner_index is None:
            return
        detail = self.group.details[self._owner_index]
        if not getattr(detail, 'availability_error', None):
            return

        try:
            owner = self.group.merged_record(self._owner_index)
        except ParsingException as e:
            error = e
        else:
            if not owner.availability_error:
                return
            error = ParsingException(f'invalid availability field: {owner.availability_error}', field='availability')

        raise ParsingException(
            f'Error parsing {detail.name} on line {self._owner_line_number}: {error}',
            line_number=self._owner_line_number,
            field=error.field,
            file=self.file,
        ) from error
