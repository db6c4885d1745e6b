"""
Serializer facade.

Every model renders itself (``as_string``); the writer adds the options used
when producing a file for transmission: recomputing trailer counts and control
totals for programmatically built files, and the line terminator.
"""
import logging

from bai2_core.constants import LINE_TERMINATOR
from bai2_core.models.bai2_model import Bai2File

logger = logging.getLogger(__name__)


class Bai2FileWriter:
    def __init__(self, obj, update_totals=False, line_terminator=LINE_TERMINATOR, ignored_summary_codes=None):
        if not isinstance(obj, Bai2File):
            raise TypeError(f"Expected a Bai2File, got {obj.__class__.__name__}")
        self.obj = obj
        self.update_totals = update_totals
        self.line_terminator = line_terminator
        self.ignored_summary_codes = ignored_summary_codes

    def write_lines(self):
        if self.update_totals:
            self.obj.update_totals(self.ignored_summary_codes)
        return self.obj.lines()

    def write(self):
        lines = self.write_lines()
        logger.debug(f"Writing {len(lines)} BAI2 records")
        return ''.join(line + self.line_terminator for line in lines)
