import json

import pytest

import main
from common import settings


def test_parse_command_prints_summary(sample_path, capsys):
    assert main.main(["parse", "--input", str(sample_path)]) == 0

    result = json.loads(capsys.readouterr().out)
    assert result["status"] == "SUCCESS"
    assert result["groups"] == 1
    assert result["accounts"] == 1
    assert result["transactions"] == 2
    assert result["records"] == 10


def test_print_command_writes_bai2(sample_path, capsys):
    assert main.main(["print", "--input", str(sample_path)]) == 0
    assert capsys.readouterr().out.startswith("01,122099999,123456789,040621,0200,1,65,,2/\n")


def test_format_command_writes_json(sample_path, capsys):
    assert main.main(["format", "--input", str(sample_path)]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["groups"][0]["header"]["originator_id"] == "122099999"


def test_integrity_failure(tmp_path, minimal_text, capsys):
    path = tmp_path / "bad.bai"
    path.write_text(minimal_text.replace("99,1000,1,6/", "99,2000,1,6/"))

    assert main.main(["parse", "--input", str(path)]) == 1
    result = json.loads(capsys.readouterr().out)
    assert result["status"] == "FAILED"
    assert result["error_type"] == "IntegrityException"

    assert main.main(["parse", "--input", str(path), "--no-integrity"]) == 0


def test_parse_failure_reports_line_number(tmp_path, minimal_text, capsys):
    path = tmp_path / "bad.bai"
    path.write_text(minimal_text.replace("49,1000,2/", "49,10X0,2/"))

    assert main.main(["parse", "--input", str(path)]) == 1
    result = json.loads(capsys.readouterr().out)
    assert result["error_type"] == "ParsingException"
    assert result["line_number"] == 4


def test_missing_file(tmp_path, capsys):
    assert main.main(["parse", "--input", str(tmp_path / "missing.bai")]) == 1
    assert json.loads(capsys.readouterr().out)["error_type"] == "FileNotFoundError"


def test_command_is_required():
    with pytest.raises(SystemExit):
        main.main([])


def test_no_strict_overrides_environment(tmp_path, minimal_text, monkeypatch, capsys):
    monkeypatch.setattr(settings, "STRICT", True)
    path = tmp_path / "open_group.bai"
    path.write_text(minimal_text.replace("98,1000,1,4/\n", ""))

    assert main.main(["parse", "--input", str(path), "--no-integrity"]) == 1
    assert json.loads(capsys.readouterr().out)["error_type"] == "IntegrityException"

    assert main.main(["parse", "--input", str(path), "--no-integrity", "--no-strict"]) == 0
    assert json.loads(capsys.readouterr().out)["groups"] == 0
