"""

This file exposes the primary functions for parsing and writing BAI2 data,
abstracting away the underlying parser classes for easy use by the CLI.
"""
import os
from typing import IO, Union

from bai2_core.parse import Bai2FileParser
from bai2_core.output_object import Bai2FileWriter
from bai2_core.models.bai2_model import Bai2File


def parse(source: Union[IO, str, bytes], **kwargs) -> Bai2File:
    """Parses a BAI2 file from a text or binary stream, a string or bytes."""
    parser = Bai2FileParser(source, **kwargs)
    return parser.parse()


def parse_from_string(s: str, **kwargs) -> Bai2File:
    """Parses a BAI2 file from a single string."""
    return parse(s, **kwargs)


def parse_from_file(f: Union[IO, str], **kwargs) -> Bai2File:
    """Parses a BAI2 file from a file-like object or a path."""
    if isinstance(f, (str, os.PathLike)):
        with open(f, 'rb') as stream:
            return parse(stream, **kwargs)
    return parse(f, **kwargs)


def write(bai2_obj: Bai2File, **kwargs) -> str:
    """Serializes a Bai2File object into a BAI2 formatted string."""
    writer = Bai2FileWriter(bai2_obj, **kwargs)
    return writer.write()
