"""
Language Risk Analysis Client.

Sends free-text mood notes to an external chat-completion provider and
parses the reply into a LanguageAnalysis. The provider is optional: when
it is not configured, unreachable, slow or returns something unparsable,
the client returns None and risk scoring carries on without the
language term.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import httpx

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\n?|\n?```")

SYSTEM_PROMPT = (
    "You are a mental health risk assessment assistant. Read the user's mood "
    "journal notes and rate the language-based risk. Respond only with a JSON "
    'object of the form {"score": number, "concerns": [string], '
    '"explanation": string}, where score is between 0 (no concern) and 100 '
    "(severe concern)."
)


@dataclass
class LanguageAnalysis:
    """Risk signal extracted from free-text notes."""

    score: float
    concerns: List[str] = field(default_factory=list)
    explanation: str = ""

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "concerns": list(self.concerns),
            "explanation": self.explanation,
        }


def parse_language_analysis(text: Optional[str]) -> Optional[LanguageAnalysis]:
    """
    Parse a provider reply, tolerating markdown code fences.

    Returns:
        LanguageAnalysis with the score clamped to 0-100, or None if the
        reply is not a JSON object with a numeric score
    """
    if not text:
        return None

    cleaned = _CODE_FENCE.sub("", text).strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        logger.warning("[LANGUAGE] Reply is not valid JSON")
        return None

    if not isinstance(data, dict):
        return None

    try:
        score = float(data.get("score"))
    except (TypeError, ValueError):
        logger.warning(f"[LANGUAGE] Reply has no numeric score: {data.get('score')!r}")
        return None

    concerns = data.get("concerns") or []
    if not isinstance(concerns, list):
        concerns = [concerns]

    return LanguageAnalysis(
        score=max(0.0, min(100.0, score)),
        concerns=[str(c) for c in concerns],
        explanation=str(data.get("explanation") or ""),
    )


class LanguageAnalysisClient:
    """
    Async client for an OpenAI-compatible chat completions endpoint.

    Configuration:
        api_url: Base URL of the provider (e.g. https://api.openai.com/v1)
        api_key: Bearer token; the client is disabled without one
        model: Model name sent with each request
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: str = "gpt-3.5-turbo",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = (api_url or os.getenv("LANGUAGE_API_URL", "https://api.openai.com/v1")).rstrip("/")
        self.api_key = api_key if api_key is not None else os.getenv("LANGUAGE_API_KEY", "")
        self.model = model
        self.timeout = timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _build_payload(self, notes: Sequence[str]) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": json.dumps(list(notes))},
            ],
            "temperature": 0.2,
            "max_tokens": 400,
        }

    async def analyze(self, notes: Sequence[str]) -> Optional[LanguageAnalysis]:
        """
        Analyze mood notes.

        Args:
            notes: Free-text notes, oldest first; blank notes are dropped

        Returns:
            LanguageAnalysis, or None when the provider is unavailable
        """
        notes = [n.strip() for n in notes if n and n.strip()]
        if not notes:
            logger.debug("[LANGUAGE] No notes to analyze")
            return None
        if not self.enabled:
            logger.debug("[LANGUAGE] Client not configured, skipping analysis")
            return None

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            ) as client:
                response = await client.post(
                    f"{self.api_url}/chat/completions",
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json=self._build_payload(notes),
                )
        except httpx.TimeoutException:
            logger.warning(f"[LANGUAGE] Provider timed out after {self.timeout}s")
            return None
        except httpx.HTTPError as e:
            logger.warning(f"[LANGUAGE] Provider request failed: {e}")
            return None

        if response.status_code != 200:
            logger.warning(
                f"[LANGUAGE] Provider returned status {response.status_code}: {response.text[:200]}"
            )
            return None

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            logger.warning("[LANGUAGE] Unexpected provider response shape")
            return None

        analysis = parse_language_analysis(content)
        if analysis:
            logger.info(
                f"[LANGUAGE] Analyzed {len(notes)} notes: score={analysis.score:.1f}, "
                f"concerns={len(analysis.concerns)}"
            )
        return analysis
