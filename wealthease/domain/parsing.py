"""Defensive parsing of language model output"""

import copy
import json
import logging
import math
import re
from datetime import date
from typing import Any, Dict, Optional

from wealthease.domain.models import CASH, WALLET, ExtractedTransaction

logger = logging.getLogger(__name__)

JSON_BLOCK_PATTERN = re.compile(r"\{[\s\S]*\}")
NON_NUMERIC_PATTERN = re.compile(r"[^0-9.\-]+")
LEADING_NUMBER_PATTERN = re.compile(r"-?(\d+\.?\d*|\.\d+)")

REQUIRED_ANALYSIS_FIELDS = ("analysis", "recommendations", "predictions", "warnings", "score")

FALLBACK_ANALYSIS: Dict[str, Any] = {
    "analysis": "Unable to parse AI response. Please try again.",
    "recommendations": "Check your transaction data and try the analysis again.",
    "predictions": {
        "nextWeekBalance": 0,
        "nextMonthBalance": 0,
        "trend": "neutral",
        "summary": "Unable to generate predictions",
    },
    "warnings": "AI analysis failed. Please verify your data.",
    "score": {
        "financialHealth": 50,
        "spendingDiscipline": 50,
        "savingsRate": 50,
        "volatility": 0,
        "confidence": 0,
    },
}


class ResponseParseError(ValueError):
    """Model output did not contain a usable JSON object"""


def extract_json_object(text: Optional[str]) -> Dict[str, Any]:
    """
    Pull the outermost {...} span out of free text and decode it.

    Raises:
        ResponseParseError: no braces, invalid JSON, or a non-object value
    """
    if not isinstance(text, str):
        raise ResponseParseError("Response is not text")

    match = JSON_BLOCK_PATTERN.search(text)
    if not match:
        raise ResponseParseError("No JSON found in response")

    try:
        parsed = json.loads(match.group(0))
    except (ValueError, RecursionError) as e:
        raise ResponseParseError(f"Invalid JSON in response: {e}") from e

    if not isinstance(parsed, dict):
        raise ResponseParseError("JSON in response is not an object")
    return parsed


def _is_present(value: Any) -> bool:
    return value is not None and value != ""


def fallback_analysis() -> Dict[str, Any]:
    return copy.deepcopy(FALLBACK_ANALYSIS)


def try_parse_analysis(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """Embedded analysis object with all required fields, or None"""
    try:
        parsed = extract_json_object(text)
        for field in REQUIRED_ANALYSIS_FIELDS:
            if field not in parsed or not _is_present(parsed[field]):
                raise ResponseParseError(f"Missing required field: {field}")
        return parsed
    except ResponseParseError as e:
        logger.warning("Unusable analysis response", extra={"step": "parse_analysis", "reason": str(e)})
        return None


def parse_analysis_response(text: Optional[str]) -> Dict[str, Any]:
    """
    Return the analysis object embedded in the model's reply.

    Any failure yields a fresh copy of the fixed fallback analysis; this
    function never raises.
    """
    parsed = try_parse_analysis(text)
    return parsed if parsed is not None else fallback_analysis()


def coerce_amount(value: Any) -> Optional[float]:
    """
    Read an amount the way a lenient float parser would.

    Strings are stripped of everything except digits, dots and minus signs
    before the leading number is taken, so "$1,234.56" becomes 1234.56.
    Returns None when no finite number can be read.
    """
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = LEADING_NUMBER_PATTERN.match(NON_NUMERIC_PATTERN.sub("", value))
        if not match:
            return None
        number = float(match.group(0))
    else:
        return None

    return number if math.isfinite(number) else None


def parse_extraction_response(text: Optional[str], today: Optional[date] = None) -> Optional[ExtractedTransaction]:
    """
    Read the chatbot's {tipe, deskripsi, jumlah, tanggal, paymentMethod}
    object. Returns None unless tipe, deskripsi and a finite non-zero jumlah are all
    present; never raises.
    """
    try:
        data = extract_json_object(text)
    except ResponseParseError as e:
        logger.info("No transaction extracted", extra={"step": "parse_extraction", "reason": str(e)})
        return None

    tipe = data.get("tipe")
    deskripsi = data.get("deskripsi")
    if not _is_present(tipe) or not _is_present(deskripsi):
        return None

    jumlah = coerce_amount(data.get("jumlah"))
    if jumlah is None or jumlah == 0:
        return None

    tanggal = data.get("tanggal") or (today or date.today()).isoformat()

    payment_method = str(data.get("paymentMethod") or WALLET).lower()
    if payment_method not in (CASH, WALLET):
        payment_method = WALLET

    extra = {k: v for k, v in data.items() if k not in ("tipe", "deskripsi", "jumlah", "tanggal", "paymentMethod")}

    return ExtractedTransaction(
        tipe=str(tipe),
        deskripsi=str(deskripsi),
        jumlah=jumlah,
        tanggal=str(tanggal),
        payment_method=payment_method,
        extra=extra,
    )
