"""
Judgment service client for answer evaluation.

Handles HTTP communication with the Gemini `generateContent` API. The client
returns the model's raw text; turning that text into a verdict is the
validation pipeline's job.

Failures are reported as OracleTimeout / OracleUnreachable. The client never
retries: the pipeline calls the oracle at most once per evaluation and falls
back to local heuristics instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from loguru import logger

from aristotle.core.errors import OracleTimeout, OracleUnreachable
from aristotle.core.models import AnswerAttempt, Item
from aristotle.integrations.prompts import build_judgment_prompt


class JudgmentBackend(Protocol):
    """Anything that can judge an attempt and return raw text."""

    async def judge(
        self,
        item: Item,
        attempt: AnswerAttempt,
        history: list[AnswerAttempt],
    ) -> str:
        ...


@dataclass
class JudgmentRequest:
    """Request payload for one judgment call."""

    item: Item
    attempt: AnswerAttempt
    history: list[AnswerAttempt]

    def to_dict(self) -> dict[str, Any]:
        """Convert request to generateContent payload format."""
        prompt = build_judgment_prompt(self.item, self.attempt, self.history)
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": 0.2},
        }


def extract_text(data: Any) -> str:
    """Pull the first candidate's text out of a generateContent response."""
    if not isinstance(data, dict):
        return ""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    if not parts:
        return ""
    return parts[0].get("text") or ""


class JudgmentClient:
    """HTTP client for the external judgment service."""

    def __init__(
        self,
        api_url: str,
        api_key: str | None,
        model: str = "gemini-1.5-flash",
        timeout_ms: int = 8000,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize judgment client.

        Args:
            api_url: Base URL for the generative language API
            api_key: API key; without one every call fails as unreachable
            model: Model name used in the request path
            timeout_ms: Request timeout in milliseconds
            client: Optional pre-built httpx client
        """
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_ms / 1000.0
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_seconds),
            follow_redirects=True,
        )

    @classmethod
    def from_settings(cls, settings) -> JudgmentClient:
        config = settings.get_judgment_config()
        return cls(
            api_url=config["api_url"],
            api_key=config["api_key"],
            model=config["model"],
            timeout_ms=config["timeout_ms"],
        )

    @property
    def endpoint(self) -> str:
        return f"{self.api_url}/models/{self.model}:generateContent"

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def judge(
        self,
        item: Item,
        attempt: AnswerAttempt,
        history: list[AnswerAttempt],
    ) -> str:
        """
        Ask the judgment service about one attempt.

        Returns:
            The raw text of the model's answer ("" if it returned no candidates)

        Raises:
            OracleTimeout: The request exceeded the timeout
            OracleUnreachable: No API key, transport failure or non-2xx status
        """
        if not self.api_key:
            raise OracleUnreachable("Judgment API key not configured")

        request = JudgmentRequest(item=item, attempt=attempt, history=history)
        try:
            response = await self.client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=request.to_dict(),
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning(f"Judgment timeout after {self.timeout_seconds}s for item {item.item_id}")
            raise OracleTimeout(str(e) or "timeout") from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"Judgment service returned {e.response.status_code} for item {item.item_id}")
            raise OracleUnreachable(f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.warning(f"Judgment request error for item {item.item_id}: {e}")
            raise OracleUnreachable(str(e)) from e

        try:
            data = response.json()
        except ValueError:
            # Not JSON at all: hand the body over for lexical inference
            return response.text
        return extract_text(data)
