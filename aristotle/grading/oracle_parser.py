"""
Parsing of judgment service output.

Two stages:
1. parse_oracle_response(): strict. Extracts a JSON object (bare or wrapped
   in a ```json fence) and validates it. Returns an oracle-confidence Verdict
   or raises OracleMalformed.
2. infer_from_text(): lenient. Looks for affirming/negating language in text
   the strict stage rejected. Returns a heuristic-confidence Verdict.
"""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    ValidationError,
    field_validator,
)

from aristotle.core.errors import OracleMalformed
from aristotle.core.models import ConfidenceSource, ErrorKind, FallbackReason, Verdict

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)

_NEGATING_RE = re.compile(
    r"\b(incorrect|wrong|mistake|not\s+(?:quite\s+)?(?:correct|right)|"
    r"isn't\s+(?:correct|right)|is\s+not\s+(?:correct|right))\b",
    re.IGNORECASE,
)
_AFFIRMING_RE = re.compile(
    r"\b(correct|right|well\s+done|good\s+job|great\s+job|perfect)\b",
    re.IGNORECASE,
)

MAX_FEEDBACK_CHARS = 200


class OraclePayload(BaseModel):
    """Structured verdict as returned by the judgment service."""

    model_config = ConfigDict(extra="ignore")

    is_correct: StrictBool = Field(
        validation_alias=AliasChoices("isCorrect", "is_correct", "correct"),
    )
    error_kind: ErrorKind | None = Field(
        default=None,
        validation_alias=AliasChoices("errorType", "error_kind", "errorKind"),
    )
    feedback: str = Field(min_length=1)
    encouragement: str = ""

    @field_validator("error_kind", mode="before")
    @classmethod
    def _normalize_kind(cls, value: Any):
        if isinstance(value, str):
            value = value.strip().lower()
            if value in ("", "null", "none"):
                return None
        return value

    def to_verdict(self) -> Verdict:
        if self.is_correct:
            kind = ErrorKind.NONE
        elif self.error_kind in (None, ErrorKind.NONE):
            kind = ErrorKind.UNKNOWN
        else:
            kind = self.error_kind
        return Verdict(
            is_correct=self.is_correct,
            error_kind=kind,
            feedback=self.feedback.strip(),
            confidence=ConfidenceSource.ORACLE,
            encouragement=self.encouragement.strip(),
        )


def extract_json_text(raw: str) -> str:
    """Best guess at the JSON object inside a model reply."""
    fenced = _FENCE_RE.search(raw)
    if fenced:
        return fenced.group(1).strip()
    start, end = raw.find("{"), raw.rfind("}")
    if start != -1 and end > start:
        return raw[start:end + 1]
    return raw.strip()


def parse_oracle_response(raw: str | dict) -> Verdict:
    """Strictly parse a judgment reply into an oracle-confidence Verdict."""
    if isinstance(raw, dict):
        data = raw
        raw_text = json.dumps(raw)
    else:
        raw_text = raw
        try:
            data = json.loads(extract_json_text(raw))
        except json.JSONDecodeError as e:
            raise OracleMalformed(f"Judgment reply is not JSON: {e.msg}", raw=raw_text) from e

    if not isinstance(data, dict):
        raise OracleMalformed("Judgment reply is not a JSON object", raw=raw_text)

    try:
        return OraclePayload.model_validate(data).to_verdict()
    except ValidationError as e:
        raise OracleMalformed(
            f"Judgment reply failed validation ({e.error_count()} errors)", raw=raw_text
        ) from e


def infer_from_text(raw: str) -> Verdict:
    """Lower-trust verdict from the wording of an unparseable reply."""
    if _NEGATING_RE.search(raw):
        is_correct, kind = False, ErrorKind.CALCULATION
    elif _AFFIRMING_RE.search(raw):
        is_correct, kind = True, ErrorKind.NONE
    else:
        is_correct, kind = False, ErrorKind.UNKNOWN

    feedback = raw.strip()
    if len(feedback) > MAX_FEEDBACK_CHARS:
        feedback = feedback[:MAX_FEEDBACK_CHARS] + "..."

    return Verdict(
        is_correct=is_correct,
        error_kind=kind,
        feedback=feedback,
        confidence=ConfidenceSource.HEURISTIC,
        encouragement="Keep working through the problem step by step!",
        fallback_reason=FallbackReason.MALFORMED,
    )
