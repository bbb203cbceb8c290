"""Centralized helpers for Anthropic LLM calls."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from anthropic import Anthropic

from src.vendorscope.config import settings
from src.vendorscope.exceptions import ProviderError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)```", re.DOTALL)


def _strip_fences(text: str) -> str:
    m = _FENCE_RE.search(text)
    return m.group(1).strip() if m else text.strip()


def _reply_text(resp: Any, model: str) -> str:
    if not resp.content:
        raise ProviderError("LLM returned no content", context={"model": model})
    text = getattr(resp.content[0], "text", None)
    if not isinstance(text, str) or not text:
        raise ProviderError(
            "LLM reply has no text block", context={"model": model},
        )
    return text


def _model(fast: bool) -> str:
    return settings.anthropic_fast_model if fast else settings.anthropic_model


def call_llm_json(
    client: Anthropic,
    system: str,
    user: str,
    *,
    fast: bool = True,
    max_tokens: int = 4096,
) -> Any:
    """Return the parsed JSON body of the reply, or ``None`` if it is not JSON."""
    model = _model(fast)
    resp = client.messages.create(
        model=model,
        max_tokens=max_tokens,
        system=system,
        messages=[{"role": "user", "content": user}],
    )
    raw = _reply_text(resp, model)
    cleaned = _strip_fences(raw)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        logger.warning("LLM returned non-JSON (%s model): %s", model, raw[:200])
        return None


def call_llm_text(
    client: Anthropic,
    system: str,
    messages: list[dict[str, str]],
    *,
    fast: bool = False,
    max_tokens: int = 1024,
) -> str:
    model = _model(fast)
    resp = client.messages.create(
        model=model,
        max_tokens=max_tokens,
        system=system,
        messages=messages,
    )
    return _reply_text(resp, model).strip()
