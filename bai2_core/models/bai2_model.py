"""
bai2_model.py
-------------
Typed models for every BAI2 record and for the File → Group → Account
hierarchy built from them.

Each record owns its fields and knows how to parse its own line, validate
its own field constraints and write itself back out (``parse``,
``validate``, ``as_string``). Section models (``Group``, ``Bai2File``) only
validate their own structure and delegate downward.
"""
import datetime
import logging
from collections import OrderedDict
from enum import Enum

from bai2_core.config import config_loader
from bai2_core.constants import (
    FIELD_DELIMITER, LINE_TERMINATOR, RECORD_DELIMITER,
    RecordCode, GroupStatus, AsOfDateModifier, FundsType, TypeCode, TypeCodeLevel,
)
from bai2_core.exceptions.exceptions import (
    ParsingException, ValidationException, NotSupportedYetException, IntegrityException,
)
from bai2_core.utils.date_utils import (
    parse_date, parse_time, parse_type_code, write_date, write_time, convert_to_string,
)
from bai2_core.utils.field_utils import (
    split_fields, parse_amount, parse_count, parse_availability, write_availability, IncompleteAvailabilityError,
)

logger = logging.getLogger(__name__)

SUPPORTED_VERSION = 2
AVAILABILITY_FUNDS_TYPES = (
    FundsType.distributed_availability_simple,
    FundsType.value_dated,
    FundsType.distributed_availability,
)


def _write_code(value):
    return value.code if isinstance(value, TypeCode) else value


def _write_enum(value):
    return value.value if isinstance(value, Enum) else value


def _json_value(value):
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    if isinstance(value, TypeCode):
        return value.code
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _json_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_json_value(item) for item in value]
    return value


def _check_currency(record, field_name='currency'):
    currency = getattr(record, field_name)
    if currency is None:
        return
    if len(currency) != 3 or not currency.isalpha() or not currency.isupper():
        raise ValidationException(
            f"{record.name}: {field_name} '{currency}' must be 3 upper-case letters",
            field=field_name,
        )


def _check_availability(record, funds_type, availability):
    if funds_type in AVAILABILITY_FUNDS_TYPES and not availability:
        raise ValidationException(
            f"{record.name}: funds type '{funds_type.value}' requires an availability schedule",
            field='availability',
        )
    if funds_type not in AVAILABILITY_FUNDS_TYPES and availability:
        raise ValidationException(
            f"{record.name}: availability given for funds type '{_write_enum(funds_type)}'",
            field='availability',
        )
    if funds_type == FundsType.value_dated and availability.get('date') is None:
        raise ValidationException(f"{record.name}: value dated funds require a date", field='availability')


# ABSTRACTION
class Bai2Model:
    code = None
    name = None

    def as_string(self):
        raise NotImplementedError()

    def __str__(self):
        return self.as_string()


class Bai2SingleModel(Bai2Model):
    """
    A single record.

    ``fields_config`` lists the record's fields in line order. An entry is
    either a field name (kept as text) or ``(name, parser, writer)``.
    """

    fields_config = ()
    required_fields = ()
    free_text = False

    def __init__(self, **fields):
        for name in self._field_names():
            setattr(self, name, None)
        for name, value in fields.items():
            setattr(self, name, value)
        self._raw_values = None

    @classmethod
    def _field_names(cls):
        return [config if isinstance(config, str) else config[0] for config in cls.fields_config]

    # parsing

    def parse(self, line):
        """
        Populate fields from a single record line.

        Returns:
            The number of characters consumed.

        Raises:
            ParsingException: If the line is not this record type or a field is malformed.
        """
        consumed = len(line)
        line = line.rstrip('\r\n')
        if not self.free_text:
            line = line.rstrip()

        prefix = self.code.value + FIELD_DELIMITER
        if not line.startswith(prefix):
            raise ParsingException(
                f'Expected record code {self.code.value}, got {line[:2]!r} instead',
                field='record_code',
            )

        body = line[len(prefix):]
        if body.endswith(RECORD_DELIMITER):
            body = body[:-1]

        values = split_fields(body)
        for name, value in self._parse_fields(values).items():
            setattr(self, name, value)
        self._raw_values = values
        return consumed

    def _parse_field(self, name, parser, raw_value):
        if raw_value is None or raw_value == '':
            return None
        try:
            return parser(raw_value.strip())
        except ValueError as e:
            raise ParsingException(f"invalid {name} field: {e}", field=name) from e

    def _parse_fields_from_config(self, values, fields_config):
        """Parse ``values`` positionally; missing trailing fields become None."""
        fields = OrderedDict()
        for index, field_config in enumerate(fields_config):
            raw_value = values[index] if index < len(values) else None
            if isinstance(field_config, str):
                fields[field_config] = raw_value if raw_value else None
            else:
                name, parser, _ = field_config
                fields[name] = self._parse_field(name, parser, raw_value)
        return fields

    def _parse_fields(self, values):
        if len(values) > len(self.fields_config):
            logger.warning(
                f"{self.name}: ignoring {len(values) - len(self.fields_config)} unexpected trailing field(s)"
            )
        return self._parse_fields_from_config(values, self.fields_config)

    # validation

    def validate(self):
        """Check field constraints that do not depend on surrounding records."""
        for name in self.required_fields:
            if getattr(self, name) in (None, ''):
                raise ValidationException(f"{self.name}: {name} is required", field=name)

    def _check_non_negative(self, *names):
        for name in names:
            value = getattr(self, name)
            if value is not None and (not isinstance(value, int) or value < 0):
                raise ValidationException(f"{self.name}: {name} must be a non-negative number", field=name)

    def _check_amount(self, *names):
        for name in names:
            value = getattr(self, name)
            if value is not None and not isinstance(value, int):
                raise ValidationException(f"{self.name}: {name} must be a whole number of cents", field=name)

    def _check_type(self, name, expected):
        value = getattr(self, name)
        if value is not None and not isinstance(value, expected):
            raise ValidationException(f"{self.name}: {name} has invalid value {value!r}", field=name)

    # writing

    def field_values(self):
        """Field texts in line order."""
        values = []
        for field_config in self.fields_config:
            if isinstance(field_config, str):
                value = getattr(self, field_config)
            else:
                name, _, writer = field_config
                value = getattr(self, name)
                value = writer(value) if value is not None else None
            values.append(convert_to_string(value))
        return values

    def as_string(self):
        return self.code.value + FIELD_DELIMITER + FIELD_DELIMITER.join(self.field_values()) + RECORD_DELIMITER

    # continuation

    def merge(self, continuations):
        """Return a copy of this record with the continuation records' fields appended."""
        if not continuations:
            return self
        values = list(self._raw_values if self._raw_values is not None else self.field_values())
        for continuation in continuations:
            values += continuation.fields
        merged = type(self)()
        merged.parse(self.code.value + FIELD_DELIMITER + FIELD_DELIMITER.join(values) + RECORD_DELIMITER)
        return merged

    def to_dict(self):
        return OrderedDict(
            [('record_code', self.code.value)] +
            [(name, _json_value(getattr(self, name))) for name in self._field_names()]
        )

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self._field_names())

    def __repr__(self):
        return f"{self.__class__.__name__}({self.as_string()!r})"


# IMPLEMENTATION
class Bai2FileHeader(Bai2SingleModel):
    code = RecordCode.file_header
    name = 'file header'
    fields_config = (
        'sender_id',
        'receiver_id',
        ('creation_date', parse_date, write_date),
        ('creation_time', parse_time, write_time),
        'file_id',
        ('physical_record_length', parse_count, str),
        ('block_size', parse_count, str),
        ('version_number', parse_count, str),
    )
    required_fields = ('sender_id', 'receiver_id', 'creation_date', 'creation_time', 'file_id')

    def validate(self):
        super().validate()
        self._check_type('creation_date', datetime.date)
        self._check_type('creation_time', datetime.time)
        self._check_non_negative('physical_record_length', 'block_size')

        # Files without an explicit version (NAB format) are accepted
        if self.version_number is not None and self.version_number != SUPPORTED_VERSION:
            raise NotSupportedYetException(
                f'Only BAI version {SUPPORTED_VERSION} supported, found version {self.version_number}',
                field='version_number',
            )


class Bai2FileTrailer(Bai2SingleModel):
    code = RecordCode.file_trailer
    name = 'file trailer'
    fields_config = (
        ('file_control_total', parse_amount, str),
        ('number_of_groups', parse_count, str),
        ('number_of_records', parse_count, str),
    )
    required_fields = ('file_control_total', 'number_of_records')

    def _parse_fields(self, values):
        """
        Some banks omit number_of_groups and send the record count in its place.
        """
        fields = super()._parse_fields(values)

        if fields.get('number_of_groups') is not None and fields.get('number_of_records') is None:
            fields['number_of_records'] = fields['number_of_groups']
            fields['number_of_groups'] = None

        return fields

    def validate(self):
        super().validate()
        self._check_amount('file_control_total')
        self._check_non_negative('number_of_groups', 'number_of_records')


class GroupHeader(Bai2SingleModel):
    code = RecordCode.group_header
    name = 'group header'
    fields_config = (
        'ultimate_receiver_id',
        'originator_id',
        ('group_status', GroupStatus, _write_enum),
        ('as_of_date', parse_date, write_date),
        ('as_of_time', parse_time, write_time),
        'currency',
        ('as_of_date_modifier', AsOfDateModifier, _write_enum),
    )
    required_fields = ('originator_id', 'group_status', 'as_of_date')

    def validate(self):
        super().validate()
        self._check_type('group_status', GroupStatus)
        self._check_type('as_of_date', datetime.date)
        self._check_type('as_of_time', datetime.time)
        self._check_type('as_of_date_modifier', AsOfDateModifier)
        _check_currency(self)


class GroupTrailer(Bai2SingleModel):
    code = RecordCode.group_trailer
    name = 'group trailer'
    fields_config = (
        ('group_control_total', parse_amount, str),
        ('number_of_accounts', parse_count, str),
        ('number_of_records', parse_count, str),
    )
    required_fields = ('group_control_total', 'number_of_accounts', 'number_of_records')

    def validate(self):
        super().validate()
        self._check_amount('group_control_total')
        self._check_non_negative('number_of_accounts', 'number_of_records')


class Summary:
    """One status or summary item carried by an account identifier record."""

    fields_config = (
        ('type_code', parse_type_code, _write_code),
        ('amount', parse_amount, str),
        ('item_count', parse_count, str),
        ('funds_type', FundsType, _write_enum),
    )

    def __init__(
        self,
        type_code=None,
        amount=None,
        item_count=None,
        funds_type=None,
        availability=None,
    ):
        self.type_code = type_code
        self.amount = amount
        self.item_count = item_count
        self.funds_type = funds_type
        self.availability = availability

    def is_empty(self):
        return all(value is None for value in (self.type_code, self.amount, self.item_count, self.funds_type))

    def to_dict(self):
        return OrderedDict([
            ('type_code', _json_value(self.type_code)),
            ('amount', self.amount),
            ('item_count', self.item_count),
            ('funds_type', _json_value(self.funds_type)),
            ('availability', _json_value(self.availability)),
        ])

    def __eq__(self, other):
        if not isinstance(other, Summary):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Summary({dict(self.to_dict())!r})"


class AccountIdentifier(Bai2SingleModel):
    code = RecordCode.account_identifier
    name = 'account identifier'
    fields_config = (
        'customer_account_number',
        'currency',
    )
    required_fields = ('customer_account_number',)

    def __init__(self, summary_items=None, **fields):
        super().__init__(**fields)
        self.summary_items = summary_items or []

    @classmethod
    def _field_names(cls):
        return super()._field_names() + ['summary_items']

    def _parse_fields(self, values):
        """
        Parse account identifier and any summary items present.
        Summary items may include availability data.
        """
        fields = self._parse_fields_from_config(values[:len(self.fields_config)], self.fields_config)

        summary_items = []
        rest = values[len(self.fields_config):]
        while rest:
            if len(rest) == 1 and not rest[0]:
                break

            summary = self._parse_fields_from_config(rest, Summary.fields_config)
            rest = rest[len(Summary.fields_config):]
            try:
                availability, rest = parse_availability(summary['funds_type'], rest)
            except ValueError as e:
                raise ParsingException(f"invalid availability field: {e}", field='availability') from e
            summary_items.append(Summary(availability=availability, **summary))

        fields['summary_items'] = summary_items
        return fields

    def validate(self):
        super().validate()
        _check_currency(self)
        for item in self.summary_items:
            if item.is_empty():
                continue
            if not isinstance(item.type_code, TypeCode):
                raise ValidationException(f"{self.name}: summary item without a type code", field='type_code')
            if item.amount is not None and not isinstance(item.amount, int):
                raise ValidationException(f"{self.name}: amount must be a whole number of cents", field='amount')
            if item.item_count is not None and (not isinstance(item.item_count, int) or item.item_count < 0):
                raise ValidationException(f"{self.name}: item_count must be a non-negative number", field='item_count')
            _check_availability(self, item.funds_type, item.availability)

    def field_values(self):
        values = super().field_values()
        for item in self.summary_items:
            for name, _, writer in Summary.fields_config:
                value = getattr(item, name)
                values.append(convert_to_string(writer(value) if value is not None else None))
            values += write_availability(item.funds_type, item.availability)
        return values


class AccountTrailer(Bai2SingleModel):
    code = RecordCode.account_trailer
    name = 'account trailer'
    fields_config = (
        ('account_control_total', parse_amount, str),
        ('number_of_records', parse_count, str),
    )
    required_fields = ('account_control_total', 'number_of_records')

    def validate(self):
        super().validate()
        self._check_amount('account_control_total')
        self._check_non_negative('number_of_records')


class TransactionDetail(Bai2SingleModel):
    """
    A 16 record.

    An availability schedule may carry on into the following continuation
    records. The line is then kept as read, with ``availability_error`` set,
    and the schedule is only complete in ``Group.merged_record``.
    """

    code = RecordCode.transaction_detail
    name = 'transaction detail'
    free_text = True
    head_fields_config = (
        ('type_code', parse_type_code, _write_code),
        ('amount', parse_amount, str),
        ('funds_type', FundsType, _write_enum),
    )
    tail_fields_config = (
        'bank_reference',
        'customer_reference',
        'text',
    )
    fields_config = head_fields_config + tail_fields_config
    required_fields = ('type_code',)

    availability_error = None
    _tail_length = None

    @classmethod
    def _field_names(cls):
        names = super()._field_names()
        return names[:len(cls.head_fields_config)] + ['availability'] + names[len(cls.head_fields_config):]

    def _parse_fields(self, values):
        """
        Parse transaction details, handling availability fields
        and the free text field, which may itself contain commas.
        """
        head = len(self.head_fields_config)
        fields = self._parse_fields_from_config(values[:head], self.head_fields_config)

        try:
            availability, rest = parse_availability(fields['funds_type'], values[head:])
        except IncompleteAvailabilityError as e:
            self.availability_error = str(e)
            self._tail_length = None
            fields['availability'] = None
            fields.update((name, None) for name in self.tail_fields_config)
            return fields
        except ValueError as e:
            raise ParsingException(f"invalid availability field: {e}", field='availability') from e

        self.availability_error = None
        self._tail_length = len(rest)
        fields['availability'] = availability

        if len(rest) > 2:
            rest = rest[:2] + [FIELD_DELIMITER.join(rest[2:])]
        fields.update(self._parse_fields_from_config(rest, self.tail_fields_config))
        return fields

    def validate(self):
        super().validate()
        if self.availability_error:
            raise ValidationException(f"{self.name}: {self.availability_error}", field='availability')
        self._check_type('type_code', TypeCode)
        self._check_non_negative('amount')
        if self.type_code.level == TypeCodeLevel.status:
            raise ValidationException(
                f"{self.name}: type code {self.type_code.code} is an account status code",
                field='type_code',
            )
        _check_availability(self, self.funds_type, self.availability)

    def field_values(self):
        if self.availability_error:
            return list(self._raw_values)
        values = [
            convert_to_string(writer(getattr(self, name)) if getattr(self, name) is not None else None)
            for name, _, writer in self.head_fields_config
        ]
        values += write_availability(self.funds_type, self.availability)
        values += [convert_to_string(getattr(self, name)) for name in self.tail_fields_config]
        return values

    def reaches_text(self):
        """True when the line itself already holds the text field."""
        if self._raw_values is None:
            return True
        return self._tail_length is not None and self._tail_length >= len(self.tail_fields_config)

    def merge(self, continuations):
        """
        Continuation records carry on from the last field of the line; once
        the line holds the text field they extend the text.
        """
        if not continuations:
            return self
        if not self.reaches_text():
            return super().merge(continuations)
        merged = type(self)(**{name: getattr(self, name) for name in self._field_names()})
        parts = [self.text] + [FIELD_DELIMITER.join(c.fields) for c in continuations]
        merged.text = ' '.join(part for part in parts if part) or None
        return merged


class ContinuationRecord(Bai2SingleModel):
    """
    An 88 record. ``owner_index`` is the position in ``Group.details`` of the
    record it continues, or None when it continues the group header.
    """

    code = RecordCode.continuation
    name = 'continuation record'
    free_text = True

    def __init__(self, fields=None, owner_index=None):
        super().__init__()
        self.fields = fields or []
        self.owner_index = owner_index

    @classmethod
    def _field_names(cls):
        return ['fields', 'owner_index']

    def _parse_fields(self, values):
        return {'fields': values}

    def field_values(self):
        return list(self.fields)


class Account:
    """
    An account section of a group: its 03 header, 16 transactions, 49 trailer
    and every continuation record belonging to them, in file order.
    """

    def __init__(self, header=None, children=None, trailer=None, records=None, header_index=None):
        self.header = header
        self.children = children or []
        self.child_indexes = []
        self.trailer = trailer
        self.records = records or []
        self.header_index = header_index

    def control_total(self, group, ignored_summary_codes=frozenset()):
        header = group.merged_record(self.header_index)
        total = 0
        for summary in header.summary_items:
            if summary.type_code and summary.type_code.code not in ignored_summary_codes:
                total += summary.amount or 0
        for child in self.children:
            total += child.amount or 0
        return total

    def validate(self, group, ignored_summary_codes=frozenset()):
        """Validate record count and control total against the account trailer."""
        number_of_records = len(self.records)
        if number_of_records != self.trailer.number_of_records:
            raise IntegrityException(
                f'Invalid number of records for account {self.header.customer_account_number}. '
                f'expected {self.trailer.number_of_records}, found {number_of_records}'
            )

        control_total = self.control_total(group, ignored_summary_codes)
        if control_total != self.trailer.account_control_total:
            raise IntegrityException(
                f'Invalid account control total for account {self.header.customer_account_number}. '
                f'expected {self.trailer.account_control_total}, found {control_total}'
            )

    def update_totals(self, group, ignored_summary_codes=frozenset()):
        if self.trailer:
            self.trailer.account_control_total = self.control_total(group, ignored_summary_codes)
            self.trailer.number_of_records = len(self.records)


class Group(Bai2Model):
    """One reporting group: header, detail records in file order, trailer."""

    def __init__(self, header=None, details=None, trailer=None):
        self.header = header
        self.details = details or []
        self.trailer = trailer

    @property
    def records(self):
        records = [self.header] if self.header else []
        records += self.details
        if self.trailer:
            records.append(self.trailer)
        return records

    def continuations_of(self, index):
        """Continuation records of the detail at ``index`` (None for the group header)."""
        start = 0 if index is None else index + 1
        continuations = []
        for detail in self.details[start:]:
            if not isinstance(detail, ContinuationRecord) or detail.owner_index != index:
                break
            continuations.append(detail)
        return continuations

    def merged_record(self, index):
        """The logical record at ``index``: the detail with its continuations folded in."""
        owner = self.header if index is None else self.details[index]
        return owner.merge(self.continuations_of(index))

    def accounts(self):
        """
        Slice the details into accounts.

        Raises:
            IntegrityException: If accounts are not properly nested.
        """
        accounts = []
        account = None
        for index, detail in enumerate(self.details):
            if isinstance(detail, AccountIdentifier):
                if account is not None:
                    raise IntegrityException(
                        f'Account {detail.customer_account_number} starts before account '
                        f'{account.header.customer_account_number} is closed'
                    )
                account = Account(header=detail, records=[detail], header_index=index)
            elif isinstance(detail, ContinuationRecord):
                if account is not None:
                    account.records.append(detail)
            elif account is None:
                raise IntegrityException(f'{detail.name.capitalize()} outside of an account')
            elif isinstance(detail, TransactionDetail):
                account.children.append(detail)
                account.child_indexes.append(index)
                account.records.append(detail)
            elif isinstance(detail, AccountTrailer):
                account.trailer = detail
                account.records.append(detail)
                accounts.append(account)
                account = None

        if account is not None:
            raise IntegrityException(
                f'Account {account.header.customer_account_number} has no account trailer'
            )
        return accounts

    def validate(self, check_integrity=True, ignored_summary_codes=None):
        """Validate the group's records, account nesting and trailer integrity."""
        if self.header is None:
            raise IntegrityException('Group without a group header')
        if ignored_summary_codes is None:
            ignored_summary_codes = config_loader.IGNORED_SUMMARY_CODES

        self.header.validate()
        for index, detail in enumerate(self.details):
            if not isinstance(detail, ContinuationRecord):
                self.merged_record(index).validate()
        if self.trailer:
            self.trailer.validate()

        accounts = self.accounts()
        if not check_integrity:
            return

        for account in accounts:
            account.validate(self, ignored_summary_codes)

        if self.trailer is None:
            return

        if self.trailer.number_of_accounts != len(accounts):
            raise IntegrityException(
                f'Invalid number of accounts for group. '
                f'expected {self.trailer.number_of_accounts}, found {len(accounts)}'
            )

        if self.trailer.number_of_records != len(self.records):
            raise IntegrityException(
                f'Invalid number of records for group. '
                f'expected {self.trailer.number_of_records}, found {len(self.records)}'
            )

        control_total = sum(account.trailer.account_control_total for account in accounts)
        if control_total != self.trailer.group_control_total:
            raise IntegrityException(
                f'Invalid group control total for group. '
                f'expected {self.trailer.group_control_total}, found {control_total}'
            )

    def update_totals(self, ignored_summary_codes=None):
        if ignored_summary_codes is None:
            ignored_summary_codes = config_loader.IGNORED_SUMMARY_CODES
        accounts = self.accounts()
        for account in accounts:
            account.update_totals(self, ignored_summary_codes)
        if self.trailer:
            self.trailer.group_control_total = sum(
                account.trailer.account_control_total for account in accounts
            )
            self.trailer.number_of_accounts = len(accounts)
            self.trailer.number_of_records = len(self.records)

    def lines(self):
        return [record.as_string() for record in self.records]

    def as_string(self):
        return ''.join(line + LINE_TERMINATOR for line in self.lines())

    def to_dict(self):
        accounts = []
        for account in self.accounts():
            accounts.append(OrderedDict([
                ('identifier', self.merged_record(account.header_index).to_dict()),
                ('transactions', [
                    self.merged_record(index).to_dict() for index in account.child_indexes
                ]),
                ('trailer', account.trailer.to_dict()),
            ]))
        return OrderedDict([
            ('header', self.header.to_dict() if self.header else None),
            ('accounts', accounts),
            ('trailer', self.trailer.to_dict() if self.trailer else None),
        ])

    def __eq__(self, other):
        if not isinstance(other, Group):
            return NotImplemented
        return (self.header, self.details, self.trailer) == (other.header, other.details, other.trailer)

    def __repr__(self):
        return f"Group(header={self.header!r}, details={len(self.details)}, trailer={self.trailer!r})"


class Bai2File(Bai2Model):
    """Root of the hierarchy: file header, groups, file trailer."""

    def __init__(self, header=None, groups=None, trailer=None):
        self.header = header
        self.groups = groups or []
        self.trailer = trailer

    @property
    def number_of_records(self):
        count = sum(len(group.records) for group in self.groups)
        count += 1 if self.header else 0
        count += 1 if self.trailer else 0
        return count

    def validate(self, check_integrity=True, ignored_summary_codes=None):
        """
        Validate the whole file, stopping at the first error.

        Raises:
            ValidationException: A record field is invalid.
            IntegrityException: Structure, counts or control totals are inconsistent.
        """
        if self.header is not None:
            self.header.validate()

        for group in self.groups:
            group.validate(check_integrity=check_integrity, ignored_summary_codes=ignored_summary_codes)

        if self.trailer is None:
            return
        self.trailer.validate()

        if not check_integrity:
            return

        if self.trailer.number_of_groups is not None and self.trailer.number_of_groups != len(self.groups):
            raise IntegrityException(
                f'Invalid number of groups for file. '
                f'expected {self.trailer.number_of_groups}, found {len(self.groups)}'
            )

        if self.trailer.number_of_records != self.number_of_records:
            raise IntegrityException(
                f'Invalid number of records for file. '
                f'expected {self.trailer.number_of_records}, found {self.number_of_records}'
            )

        control_total = sum(group.trailer.group_control_total for group in self.groups if group.trailer)
        if control_total != self.trailer.file_control_total:
            raise IntegrityException(
                f'Invalid file control total for file. '
                f'expected {self.trailer.file_control_total}, found {control_total}'
            )

    def update_totals(self, ignored_summary_codes=None):
        for group in self.groups:
            group.update_totals(ignored_summary_codes)
        if self.trailer:
            self.trailer.file_control_total = sum(
                group.trailer.group_control_total or 0 for group in self.groups if group.trailer
            )
            self.trailer.number_of_groups = len(self.groups)
            self.trailer.number_of_records = self.number_of_records

    def lines(self):
        lines = [self.header.as_string()] if self.header else []
        for group in self.groups:
            lines += group.lines()
        if self.trailer:
            lines.append(self.trailer.as_string())
        return lines

    def as_string(self):
        return ''.join(line + LINE_TERMINATOR for line in self.lines())

    def to_dict(self):
        return OrderedDict([
            ('header', self.header.to_dict() if self.header else None),
            ('groups', [group.to_dict() for group in self.groups]),
            ('trailer', self.trailer.to_dict() if self.trailer else None),
        ])

    def __eq__(self, other):
        if not isinstance(other, Bai2File):
            return NotImplemented
        return (self.header, self.groups, self.trailer) == (other.header, other.groups, other.trailer)

    def __repr__(self):
        return f"Bai2File(header={self.header!r}, groups={len(self.groups)}, trailer={self.trailer!r})"
