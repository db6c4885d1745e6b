"""
Enumerations and lookup tables shared by the BAI2 parser, validator and writer.
"""
from collections import namedtuple
from enum import Enum


LINE_TERMINATOR = '\n'
FIELD_DELIMITER = ','
RECORD_DELIMITER = '/'


class RecordCode(Enum):
    file_header = '01'
    group_header = '02'
    account_identifier = '03'
    transaction_detail = '16'
    account_trailer = '49'
    continuation = '88'
    group_trailer = '98'
    file_trailer = '99'


RECORD_CODES = frozenset(code.value for code in RecordCode)

# Records whose last field is free text running to the end of the physical line
TEXT_RECORD_CODES = frozenset([
    RecordCode.transaction_detail.value,
    RecordCode.continuation.value,
])

DETAIL_RECORD_CODES = frozenset([
    RecordCode.account_identifier,
    RecordCode.transaction_detail,
    RecordCode.account_trailer,
    RecordCode.continuation,
])


class GroupStatus(Enum):
    update = '1'
    deletion = '2'
    correction = '3'
    test_only = '4'


class AsOfDateModifier(Enum):
    interim_previous_day = '1'
    final_previous_day = '2'
    interim_same_day = '3'
    final_same_day = '4'


class FundsType(Enum):
    immediate_availability = '0'
    one_day_availability = '1'
    two_or_more_days_availability = '2'
    distributed_availability_simple = 'S'
    value_dated = 'V'
    distributed_availability = 'D'
    unknown_availability = 'Z'


class TypeCodeTransaction(Enum):
    credit = 'credit'
    debit = 'debit'
    misc = 'misc'


class TypeCodeLevel(Enum):
    status = 'status'
    summary = 'summary'
    detail = 'detail'


TypeCode = namedtuple('TypeCode', ['code', 'transaction', 'level', 'description'])


def _type_codes(*entries):
    return {
        code: TypeCode(code, transaction, level, description)
        for code, transaction, level, description in entries
    }


_credit = TypeCodeTransaction.credit
_debit = TypeCodeTransaction.debit
_misc = TypeCodeTransaction.misc
_status = TypeCodeLevel.status
_summary = TypeCodeLevel.summary
_detail = TypeCodeLevel.detail

TypeCodes = _type_codes(
    # Account status
    ('010', None, _status, 'Opening Ledger'),
    ('011', None, _status, 'Average Opening Ledger MTD'),
    ('012', None, _status, 'Average Opening Ledger YTD'),
    ('015', None, _status, 'Closing Ledger'),
    ('020', None, _status, 'Average Closing Ledger MTD'),
    ('021', None, _status, 'Average Closing Ledger Previous Month'),
    ('025', None, _status, 'Total Float'),
    ('030', None, _status, 'Current Ledger'),
    ('040', None, _status, 'Opening Available'),
    ('045', None, _status, 'Closing Available'),
    ('050', None, _status, 'Average Closing Available MTD'),
    ('055', None, _status, 'Current Available'),
    ('057', None, _status, 'Investment Sweep Position'),
    ('060', None, _status, 'Current Available (CRS Suppressed)'),
    ('072', None, _status, 'One-Day Float'),
    ('073', None, _status, 'Two-Day Float'),
    ('074', None, _status, 'Three or More Days Float'),
    ('100', _credit, _summary, 'Total Credits'),
    ('102', _credit, _summary, 'Number of Credits'),
    # Credit detail
    ('108', _credit, _detail, 'Credit (Any Type)'),
    ('115', _credit, _detail, 'Lockbox Deposit'),
    ('142', _credit, _detail, 'ACH Credit Received'),
    ('165', _credit, _detail, 'Preauthorized ACH Credit'),
    ('175', _credit, _detail, 'Check Deposit Package'),
    ('195', _credit, _detail, 'Incoming Money Transfer'),
    ('201', _credit, _detail, 'Incoming Internal Money Transfer'),
    ('206', _credit, _detail, 'Book Transfer Credit'),
    ('275', _credit, _detail, 'ZBA Credit'),
    ('301', _credit, _detail, 'Commercial Deposit'),
    ('354', _credit, _detail, 'Interest Credit'),
    ('399', _credit, _detail, 'Miscellaneous Credit'),
    ('400', _debit, _summary, 'Total Debits'),
    ('402', _debit, _summary, 'Number of Debits'),
    # Debit detail
    ('408', _debit, _detail, 'Float Adjustment'),
    ('451', _debit, _detail, 'ACH Debit Received'),
    ('455', _debit, _detail, 'Preauthorized ACH Debit'),
    ('475', _debit, _detail, 'Check Paid'),
    ('495', _debit, _detail, 'Outgoing Money Transfer'),
    ('501', _debit, _detail, 'Automatic Transfer'),
    ('506', _debit, _detail, 'Book Transfer Debit'),
    ('575', _debit, _detail, 'ZBA Debit'),
    ('661', _debit, _detail, 'Account Analysis Fee'),
    ('699', _debit, _detail, 'Miscellaneous Debit'),
    # Loan
    ('720', _misc, _detail, 'Loan Payment'),
    ('760', _misc, _detail, 'Loan Disbursing'),
    # Non-monetary
    ('890', _misc, _detail, 'Contains Non-monetary Information'),
)


# (first, last, transaction, level) for codes not listed in TypeCodes
TypeCodeRanges = (
    (1, 99, None, _status),
    (100, 399, _credit, _detail),
    (400, 699, _debit, _detail),
    (700, 799, _misc, _detail),
    (800, 899, _misc, _detail),
    (900, 919, None, _status),
    (920, 959, _credit, _detail),
    (960, 999, _debit, _detail),
)
