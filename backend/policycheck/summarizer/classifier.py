"""LangChain classifier client: one model call per chunk, then a total safe parse."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from policycheck.core.config import Settings
from policycheck.errors import ClassifierUnavailableError
from policycheck.summarizer.models import EXCERPT_MAX_CHARS, Clause, ClauseTag, Risk
from policycheck.summarizer.prompts import build_prompt

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^\s*```(?:json)?\s*|\s*```\s*$", re.I)

_TAGS = {tag.value: tag for tag in ClauseTag}
_RISKS = {risk.value: risk for risk in Risk}


def build_chat_model(settings: Settings) -> BaseChatModel:
    """Construct the default Gemini chat model from settings."""
    if not settings.gemini_api_key:
        raise ClassifierUnavailableError("GEMINI_API_KEY is not set")
    return ChatGoogleGenerativeAI(
        model=settings.classifier_model,
        google_api_key=settings.gemini_api_key,
        temperature=settings.classifier_temperature,
    )


def _message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and isinstance(part.get("text"), str):
            parts.append(part["text"])
    return "".join(parts)


def parse_model_output(raw: str) -> Any:
    """
    Decode the model's reply as JSON, tolerating Markdown fences.

    Returns None (and logs) when the reply is not JSON; the caller's safe
    parse turns that into zero clauses.
    """
    cleaned = _FENCE.sub("", raw or "").strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning("Classifier returned non-JSON output (%s): %.200s", e, raw)
        return None


def _text_field(value: Any) -> str:
    if isinstance(value, list):
        return "\n".join(str(v).strip() for v in value if v is not None and str(v).strip())
    if value is None:
        return ""
    return str(value).strip()


def safe_parse_clauses(obj: Any) -> list[Clause]:
    """
    Convert untrusted model output into validated clauses. Never raises.

    - unknown ``tag`` becomes ``other``
    - unknown ``risk`` becomes ``Y`` (never promoted to green)
    - items with empty ``plain_english`` are dropped
    - ``text_excerpt`` is cut to 240 characters
    """
    items = obj.get("clauses") if isinstance(obj, dict) else None
    if not isinstance(items, list):
        return []
    out: list[Clause] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        plain = _text_field(item.get("plain_english"))
        if not plain:
            continue
        tag = _TAGS.get(str(item.get("tag", "")).strip(), ClauseTag.OTHER)
        risk = _RISKS.get(str(item.get("risk", "")).strip(), Risk.YELLOW)
        excerpt = _text_field(item.get("text_excerpt"))[:EXCERPT_MAX_CHARS]
        out.append(
            Clause(
                tag=tag,
                risk=risk,
                rationale=_text_field(item.get("rationale")),
                plain_english=plain,
                text_excerpt=excerpt or None,
            )
        )
    return out


class ClassifierClient:
    """
    Classify one chunk into clauses.

    Exactly one model invocation per call; retries, timeouts and fan-out are
    the orchestrator's concern. Model errors propagate to the caller.
    """

    def __init__(self, model: BaseChatModel) -> None:
        self._model = model

    @classmethod
    def from_settings(cls, settings: Settings) -> ClassifierClient:
        return cls(build_chat_model(settings))

    @staticmethod
    def _messages(chunk: str) -> list[BaseMessage]:
        system, user = build_prompt(chunk)
        return [SystemMessage(content=system), HumanMessage(content=user)]

    def classify(self, chunk: str) -> list[Clause]:
        response = self._model.invoke(self._messages(chunk))
        clauses = safe_parse_clauses(parse_model_output(_message_text(response)))
        logger.info("Classified chunk of %d chars into %d clause(s)", len(chunk), len(clauses))
        return clauses

    async def aclassify(self, chunk: str) -> list[Clause]:
        response = await self._model.ainvoke(self._messages(chunk))
        clauses = safe_parse_clauses(parse_model_output(_message_text(response)))
        logger.info("Classified chunk of %d chars into %d clause(s)", len(chunk), len(clauses))
        return clauses
