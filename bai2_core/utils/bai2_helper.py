"""
Record tokenizer.

Splits a raw BAI2 stream into logical records. A record ends at its ``/``
delimiter or at the end of the physical line, whichever comes first, with two
exceptions: a ``/`` inside a double-quoted substring does not end a record,
and transaction detail (16) and continuation (88) records carry free text that
may contain ``/``, so they only end at the end of the line.
"""
import codecs
import io
from typing import IO, Iterator, Optional, Tuple, Union

from bai2_core.constants import FIELD_DELIMITER, LINE_TERMINATOR, RECORD_DELIMITER, RECORD_CODES, TEXT_RECORD_CODES
from bai2_core.exceptions.exceptions import ParsingException

DEFAULT_CHUNK_SIZE = 4096


def _record_code(data: str) -> Optional[str]:
    """Return the two characters in front of the first comma of the current line."""
    line = data.split(LINE_TERMINATOR, 1)[0]
    index = line.find(FIELD_DELIMITER)
    if index < 2:
        return None
    return line[index - 2:index]


def record_length(data: str, at_eof: bool) -> Optional[int]:
    """
    Length of the first logical record in ``data``.

    Returns None when more input is needed. At end of stream the remaining
    data is complete when it is a free-text record or carries no known record
    code (noise). An unterminated known record stays None and can never be
    completed.
    """
    if not data:
        return None

    code = _record_code(data)
    text_record = code in TEXT_RECORD_CODES
    in_quotes = False

    for index, char in enumerate(data):
        if char == LINE_TERMINATOR:
            return index + 1
        if text_record:
            continue
        if char == '"':
            in_quotes = not in_quotes
        elif char == RECORD_DELIMITER and not in_quotes:
            return index + 1

    if at_eof and (text_record or code not in RECORD_CODES):
        return len(data)

    return None


def _read_chunks(stream: IO, chunk_size: int, encoding: str) -> Iterator[str]:
    decoder = None
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        if isinstance(chunk, bytes):
            if decoder is None:
                decoder = codecs.getincrementaldecoder(encoding)()
            chunk = decoder.decode(chunk)
        yield chunk

    if decoder is not None:
        tail = decoder.decode(b'', final=True)
        if tail:
            yield tail


def record_generator(stream: IO, chunk_size: int = DEFAULT_CHUNK_SIZE,
                     encoding: str = 'utf-8') -> Iterator[Tuple[int, str]]:
    """
    Yield ``(line_number, record_text)`` for every logical record in the stream.

    ``line_number`` is the physical line the record starts on. Records made only
    of whitespace (line breaks following a ``/``) are yielded as well so the
    caller decides what counts as noise.

    Raises:
        ParsingException: If the stream ends inside an unterminated record.
    """
    buffer = ''
    line_number = 1
    chunks = _read_chunks(stream, chunk_size, encoding)
    at_eof = False

    while True:
        length = record_length(buffer, at_eof)
        if length is None:
            if at_eof:
                break
            try:
                buffer += next(chunks)
            except StopIteration:
                at_eof = True
            continue

        record = buffer[:length]
        buffer = buffer[length:]
        yield line_number, record
        line_number += record.count(LINE_TERMINATOR)

    if buffer:
        raise ParsingException(
            f'Unterminated record on line {line_number}: {buffer.strip()[:40]!r}',
            line_number=line_number,
        )


class IteratorHelper:
    """Wraps ``record_generator`` for callers that pass text, bytes or a stream."""

    def __init__(self, source: Union[str, bytes, IO], chunk_size: int = DEFAULT_CHUNK_SIZE,
                 encoding: str = 'utf-8'):
        if isinstance(source, str):
            source = io.StringIO(source)
        elif isinstance(source, bytes):
            source = io.BytesIO(source)
        self._generator = record_generator(source, chunk_size=chunk_size, encoding=encoding)

    def __iter__(self):
        return self._generator

