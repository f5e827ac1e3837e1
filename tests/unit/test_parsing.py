"""Unit tests for model response parsing"""

import json
import pytest
from datetime import date
from wealthease.domain.parsing import (
    FALLBACK_ANALYSIS,
    ResponseParseError,
    coerce_amount,
    extract_json_object,
    parse_analysis_response,
    parse_extraction_response,
    try_parse_analysis,
)


def test_analysis_embedded_in_prose():
    text = (
        'blah {"analysis":"a","recommendations":"r","predictions":{},'
        '"warnings":"w","score":{}} trailing'
    )

    parsed = parse_analysis_response(text)

    assert parsed["analysis"] == "a"
    assert parsed["recommendations"] == "r"
    assert parsed["warnings"] == "w"
    assert parsed["predictions"] == {}


def test_no_json_returns_fallback():
    parsed = parse_analysis_response("no json here")

    assert parsed["score"]["financialHealth"] == 50
    assert parsed["score"]["confidence"] == 0
    assert parsed["predictions"]["trend"] == "neutral"


def test_missing_field_returns_fallback():
    text = json.dumps({"analysis": "a", "recommendations": "r", "predictions": {}, "warnings": "w"})

    assert parse_analysis_response(text) == FALLBACK_ANALYSIS
    assert try_parse_analysis(text) is None


def test_empty_string_field_counts_as_missing():
    text = json.dumps(
        {"analysis": "", "recommendations": "r", "predictions": {}, "warnings": "w", "score": {}}
    )

    assert try_parse_analysis(text) is None


def test_invalid_json_returns_fallback():
    assert parse_analysis_response("{analysis: oops}") == FALLBACK_ANALYSIS
    assert parse_analysis_response(None) == FALLBACK_ANALYSIS


def test_fallback_is_a_fresh_copy():
    first = parse_analysis_response("nothing")
    first["score"]["financialHealth"] = 0

    assert parse_analysis_response("nothing")["score"]["financialHealth"] == 50


def test_greedy_match_spans_first_to_last_brace():
    """Two separate objects in one reply make the span invalid JSON"""
    with pytest.raises(ResponseParseError):
        extract_json_object('{"a": 1} and also {"b": 2}')


def test_json_array_is_rejected():
    with pytest.raises(ResponseParseError):
        extract_json_object("[1, 2, 3]")


@pytest.mark.parametrize(
    "value,expected",
    [
        ("$1,234.56", 1234.56),
        ("50 dollars", 50.0),
        (75, 75.0),
        ("-12.5", -12.5),
        ("abc", None),
        (None, None),
        (True, None),
        (float("inf"), None),
    ],
)
def test_coerce_amount(value, expected):
    assert coerce_amount(value) == expected


def test_extraction_with_currency_string():
    text = (
        'Sure! {"tipe": "pengeluaran", "deskripsi": "Bought coffee", '
        '"jumlah": "$1,234.56", "tanggal": "2024-05-02", "paymentMethod": "CASH"}'
    )

    extracted = parse_extraction_response(text, today=date(2024, 5, 3))

    assert extracted.jumlah == 1234.56
    assert extracted.transaction_type == "expense"
    assert extracted.tanggal == "2024-05-02"
    assert extracted.payment_method == "cash"


def test_extraction_defaults_date_and_payment_method():
    text = '{"tipe": "pemasukan", "deskripsi": "got bonus", "jumlah": 100, "kategori": "bonus"}'

    extracted = parse_extraction_response(text, today=date(2024, 5, 3))

    assert extracted.transaction_type == "income"
    assert extracted.tanggal == "2024-05-03"
    assert extracted.payment_method == "wallet"
    assert extracted.to_dict()["kategori"] == "bonus"


@pytest.mark.parametrize(
    "text",
    [
        "{}",
        "I could not find a transaction",
        '{"tipe": "pengeluaran", "jumlah": 5}',
        '{"tipe": "pengeluaran", "deskripsi": "coffee", "jumlah": "lots"}',
        '{"tipe": "pengeluaran", "deskripsi": "coffee", "jumlah": 0}',
        '{"tipe": "pengeluaran", "deskripsi": "coffee", "jumlah": "$0.00"}',
    ],
)
def test_extraction_returns_none_when_incomplete(text):
    assert parse_extraction_response(text) is None


def test_deeply_nested_json_is_a_parse_error():
    """Nesting past the decoder's recursion limit is treated as unreadable"""
    nested = "[" * 5000 + "]" * 5000

    with pytest.raises(ResponseParseError):
        extract_json_object('{"analysis": ' + nested + "}")
    assert try_parse_analysis('{"analysis": ' + nested + "}") is None
    assert parse_analysis_response('{"analysis": ' + nested + "}") == FALLBACK_ANALYSIS
    assert parse_extraction_response('{"tipe": ' + nested + "}") is None
