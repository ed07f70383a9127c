# Tests for records (TSV reading/writing) and utils.detect_file_encoding.

import csv

import pytest

import utils
from errors import RecordFormatError
from records import (
    Record,
    convert_text,
    decode_bytes,
    read_records,
    rows_to_tsv,
    strip_bom,
)


def test_read_records_fields_and_skips():
    text = "#separator:tab\n#html:true\na\t [sound:x.mp3] \ttag1\nb\n\n"
    assert list(read_records(text)) == [
        Record("a", "[sound:x.mp3]", "tag1"),
        Record("b", "", ""),
    ]


def test_read_records_keeps_hash_rows_after_header():
    text = "#separator:tab\na\n\n#1 heading\tx\n"
    assert list(read_records(text)) == [
        Record("a", "", ""),
        Record("#1 heading", "x", ""),
    ]


def test_read_records_strips_bom():
    records = list(read_records("\ufeffa\tb"))
    assert records[0].markup == "a"


def test_read_records_quoted_fields():
    text = '"<div class=""dc-line"">x\ty</div>"\t"s"\n'
    records = list(read_records(text))
    assert records == [Record('<div class="dc-line">x\ty</div>', "s", "")]


def test_read_records_tolerates_stray_quotes():
    records = list(read_records('he said "hi" there\tx\n'))
    assert records[0].markup == 'he said "hi" there'


def test_read_records_crlf_line_endings():
    records = list(read_records("a\tb\r\nc\td\r\n"))
    assert [r.markup for r in records] == ["a", "c"]
    assert records[0].sound == "b"


def test_read_records_raises_record_format_error():
    old_limit = csv.field_size_limit(5)
    try:
        with pytest.raises(RecordFormatError) as excinfo:
            list(read_records("ok\nmuch too long field\n"))
    finally:
        csv.field_size_limit(old_limit)
    assert excinfo.value.line == 2
    assert "line 2" in str(excinfo.value)


def test_strip_bom_only_leading():
    assert strip_bom("\ufeffab\ufeff") == "ab\ufeff"
    assert strip_bom("") == ""


def test_decode_bytes_utf8_with_bom():
    assert decode_bytes("\ufeffcafé\tx".encode("utf-8")) == "café\tx"


def test_detect_encoding_prefers_utf8():
    assert utils.detect_file_encoding("日本語".encode("utf-8")) == "utf-8"


def test_detect_encoding_uses_confident_chardet(monkeypatch):
    monkeypatch.setattr(utils.chardet, "detect", lambda _b: {"encoding": "Windows-1252", "confidence": 0.9})
    assert utils.detect_file_encoding(b"caf\xe9") == "Windows-1252"


def test_detect_encoding_falls_back_to_priority_list(monkeypatch):
    monkeypatch.setattr(utils.chardet, "detect", lambda _b: {"encoding": None, "confidence": 0.0})
    assert utils.detect_file_encoding(b"caf\xe9") == "latin-1"


def test_convert_text_end_to_end():
    text = (
        '<div class="dc-line dc-translation">Hello</div>'
        '<div class="dc-line">{{c1::World::Monde}}</div>\t"[sound:a.mp3]"\ttags\n'
        "{{c1::solo::seul}}\n"
    )
    rows = convert_text(text, "#ff0000")
    assert len(rows) == 2
    assert rows[0][1] == "Hello"
    assert '<span style="color:#ff0000;">World</span></div><div class="dc-audio"' in rows[0][0]
    assert rows[1] == ('<span style="color:#ff0000;">solo</span>', "seul")


def test_rows_to_tsv_quotes_when_needed():
    assert rows_to_tsv([("a", "b")]) == "a\tb\n"
    assert rows_to_tsv([("x\ty", "z")]) == '"x\ty"\tz\n'
    assert rows_to_tsv([('<div class="c">', "")]) == '"<div class=""c"">"\t\n'
