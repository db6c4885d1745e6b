import io

import pytest

import bai2_core
from bai2_core.exceptions.exceptions import (
    EmptyFileException, IntegrityException, ParsingException, UnexpectedRecordCodeException,
)
from bai2_core.models.bai2_model import AccountIdentifier, AccountTrailer, ContinuationRecord, TransactionDetail


def test_parse_minimal_file(minimal_text):
    bai_file = bai2_core.parse_from_string(minimal_text)

    assert bai_file.header.sender_id == "SENDER"
    assert bai_file.trailer.number_of_records == 6
    assert len(bai_file.groups) == 1

    group = bai_file.groups[0]
    assert group.header.originator_id == "SENDER"
    assert group.trailer.number_of_accounts == 1
    assert len(group.details) == 2
    bai_file.validate()


def test_parse_sample_file(sample_path):
    bai_file = bai2_core.parse_from_file(sample_path)
    group = bai_file.groups[0]

    assert [type(detail) for detail in group.details] == [
        AccountIdentifier, ContinuationRecord, TransactionDetail,
        TransactionDetail, ContinuationRecord, AccountTrailer,
    ]
    assert group.details[1].owner_index == 0
    assert group.details[4].owner_index == 3
    assert bai_file.number_of_records == 10
    bai_file.validate()


def test_parse_from_binary_stream(sample_path):
    with open(sample_path, "rb") as f:
        bai_file = bai2_core.parse(f, chunk_size=5)
    assert bai_file == bai2_core.parse_from_file(sample_path)


def test_merged_records(sample_path):
    group = bai2_core.parse_from_file(sample_path).groups[0]

    identifier = group.merged_record(0)
    assert [item.type_code.code for item in identifier.summary_items] == ["010", "015", "100", "400"]
    assert group.merged_record(3).text == "CHECK PAID ADDITIONAL TEXT"
    assert group.merged_record(2).text == "LOCKBOX DEPOSIT"


def test_accounts(sample_path):
    accounts = bai2_core.parse_from_file(sample_path).groups[0].accounts()

    assert len(accounts) == 1
    account = accounts[0]
    assert account.header.customer_account_number == "0975312468"
    assert [child.amount for child in account.children] == [25000, 10000]
    assert account.child_indexes == [2, 3]
    assert len(account.records) == 6


def test_continuation_of_group_header():
    text = (
        "01,S,R,240101,0800,F1,,,2/\n"
        "02,R,S,1,240101,,USD,/\n"
        "88,EXTRA/\n"
        "98,0,0,3/\n"
        "99,0,1,5/\n"
    )
    group = bai2_core.parse_from_string(text).groups[0]
    assert group.details[0].owner_index is None
    assert group.continuations_of(None) == [group.details[0]]


@pytest.mark.parametrize("text", ["", "\n\n", "hello\nworld\n", "no records here", "17,abc/\n"])
def test_input_without_records(text):
    with pytest.raises(EmptyFileException):
        bai2_core.parse_from_string(text)


@pytest.mark.parametrize("line", ["03,12345,USD,/", "16,115,100,0,,,/", "49,100,2/", "88,TEXT/"])
def test_detail_record_before_group_header(line):
    text = "01,S,R,240101,0800,F1,,,2/\n" + line + "\n"
    with pytest.raises(UnexpectedRecordCodeException) as exc_info:
        bai2_core.parse_from_string(text)
    assert exc_info.value.line_number == 2


def test_detail_record_after_group_trailer(minimal_text):
    lines = minimal_text.splitlines()
    text = "\n".join(lines[:5] + ["16,115,100,0,,,/"] + lines[5:]) + "\n"
    with pytest.raises(UnexpectedRecordCodeException):
        bai2_core.parse_from_string(text)


def test_group_without_trailer_is_dropped(minimal_text):
    text = minimal_text.replace("98,1000,1,4/\n", "")
    bai_file = bai2_core.parse_from_string(text)

    assert bai_file.groups == []
    assert bai_file.trailer.number_of_records == 6


def test_group_without_trailer_in_strict_mode(minimal_text):
    text = minimal_text.replace("98,1000,1,4/\n", "")
    with pytest.raises(IntegrityException):
        bai2_core.parse_from_string(text, strict=True)


def test_unknown_records_and_noise_are_skipped(minimal_text):
    noisy = "garbage line\n" + minimal_text.replace("49,", "77,IGNORED/\n49,") + "\n\n"
    assert bai2_core.parse_from_string(noisy) == bai2_core.parse_from_string(minimal_text)


def test_leading_characters_before_record_code(minimal_text):
    prefixed = "\n".join("  " + line for line in minimal_text.splitlines()) + "\n"
    bai_file = bai2_core.parse_from_string(prefixed)
    assert bai_file == bai2_core.parse_from_string(minimal_text)


def test_crlf_line_endings(minimal_text):
    bai_file = bai2_core.parse_from_string(minimal_text.replace("\n", "\r\n"))
    assert bai_file == bai2_core.parse_from_string(minimal_text)
    bai_file.validate()


def test_records_without_slash(minimal_text):
    bai_file = bai2_core.parse_from_string(minimal_text.replace("/\n", "\n"))
    assert bai_file == bai2_core.parse_from_string(minimal_text)


def test_single_line_file(minimal_text):
    bai_file = bai2_core.parse_from_string(minimal_text.replace("\n", ""))
    assert bai_file == bai2_core.parse_from_string(minimal_text)


def test_parse_error_reports_line_and_field(minimal_text):
    text = minimal_text.replace("49,1000,2/", "49,10X0,2/")
    with pytest.raises(ParsingException) as exc_info:
        bai2_core.parse_from_string(text)

    error = exc_info.value
    assert error.line_number == 4
    assert error.field == "account_control_total"
    assert "line 4" in str(error)
    assert error.file.header.sender_id == "SENDER"


def test_parse_from_file_object(minimal_text):
    bai_file = bai2_core.parse_from_file(io.StringIO(minimal_text))
    assert bai_file.trailer.file_control_total == 1000


def test_account_record_count_mismatch(minimal_text):
    bai_file = bai2_core.parse_from_string(minimal_text.replace("49,1000,2/", "49,1000,3/"))
    with pytest.raises(IntegrityException, match="number of records for account"):
        bai_file.validate()


def test_account_control_total_mismatch(minimal_text):
    bai_file = bai2_core.parse_from_string(minimal_text.replace("49,1000,2/", "49,999,2/"))
    with pytest.raises(IntegrityException, match="account control total"):
        bai_file.validate()


def test_group_account_count_mismatch(minimal_text):
    bai_file = bai2_core.parse_from_string(minimal_text.replace("98,1000,1,4/", "98,1000,2,4/"))
    with pytest.raises(IntegrityException, match="number of accounts"):
        bai_file.validate()


def test_group_record_count_mismatch(minimal_text):
    bai_file = bai2_core.parse_from_string(minimal_text.replace("98,1000,1,4/", "98,1000,1,5/"))
    with pytest.raises(IntegrityException, match="number of records for group"):
        bai_file.validate()


def test_file_control_total_mismatch(minimal_text):
    bai_file = bai2_core.parse_from_string(minimal_text.replace("99,1000,1,6/", "99,2000,1,6/"))
    with pytest.raises(IntegrityException, match="file control total"):
        bai_file.validate()


def test_file_group_count_mismatch(minimal_text):
    bai_file = bai2_core.parse_from_string(minimal_text.replace("99,1000,1,6/", "99,1000,2,6/"))
    with pytest.raises(IntegrityException, match="number of groups"):
        bai_file.validate()


def test_integrity_checks_can_be_skipped(minimal_text):
    bai_file = bai2_core.parse_from_string(minimal_text.replace("99,1000,1,6/", "99,2000,1,6/"))
    bai_file.validate(check_integrity=False)


def test_ignored_summary_codes(minimal_text):
    text = minimal_text.replace("03,12345,USD,010,1000,,/", "03,12345,USD,010,1000,,,900,50,,/")
    bai_file = bai2_core.parse_from_string(text)

    with pytest.raises(IntegrityException):
        bai_file.validate()
    bai_file.validate(ignored_summary_codes=frozenset(["900"]))


def test_account_without_trailer():
    text = (
        "01,S,R,240101,0800,F1,,,2/\n"
        "02,R,S,1,240101,,USD,/\n"
        "03,12345,USD,/\n"
        "98,0,1,3/\n"
        "99,0,1,5/\n"
    )
    bai_file = bai2_core.parse_from_string(text)
    with pytest.raises(IntegrityException, match="no account trailer"):
        bai_file.validate()


SPLIT_DETAIL_FILE = (
    "01,S,R,240101,0800,F1,,,2/\n"
    "02,R,S,1,240101,,USD,/\n"
    "03,12345,USD,/\n"
    "16,115,500,D,2,0,200\n"
    "88,1,300,REF,,TEXT/\n"
    "49,500,4/\n"
    "98,500,1,6/\n"
    "99,500,1,8/\n"
)


def test_availability_continued_on_next_record():
    bai_file = bai2_core.parse_from_string(SPLIT_DETAIL_FILE)
    group = bai_file.groups[0]

    detail = group.merged_record(1)
    assert dict(detail.availability) == {"0": 200, "1": 300}
    assert detail.bank_reference == "REF"
    assert detail.text == "TEXT"
    bai_file.validate()

    assert bai2_core.parse_from_string(bai2_core.write(bai_file)) == bai_file


def test_references_continued_on_next_record():
    text = SPLIT_DETAIL_FILE.replace(
        "16,115,500,D,2,0,200\n88,1,300,REF,,TEXT/\n",
        "16,115,500,Z\n88,BANKREF,CUSTREF,SOME TEXT/\n",
    )
    bai_file = bai2_core.parse_from_string(text)

    detail = bai_file.groups[0].merged_record(1)
    assert detail.bank_reference == "BANKREF"
    assert detail.customer_reference == "CUSTREF"
    assert detail.text == "SOME TEXT"
    bai_file.validate()


def test_incomplete_availability_without_continuation():
    text = SPLIT_DETAIL_FILE.replace("88,1,300,REF,,TEXT/\n", "")
    with pytest.raises(ParsingException) as exc_info:
        bai2_core.parse_from_string(text)

    assert exc_info.value.line_number == 4
    assert exc_info.value.field == "availability"


def test_file_header_closes_open_group(minimal_text):
    lines = minimal_text.splitlines(keepends=True)
    text = lines[0] + lines[1] + minimal_text

    with pytest.raises(IntegrityException) as exc_info:
        bai2_core.parse_from_string(text, strict=True)
    assert exc_info.value.line_number == 3

    bai_file = bai2_core.parse_from_string(text)
    assert len(bai_file.groups) == 1
    bai_file.validate()
