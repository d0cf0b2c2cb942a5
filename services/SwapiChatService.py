# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-27
# Updated: 2026-02-06
# Description: SwapiChatService.py
# -----------------------------------------------------------------------------
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from chat.OpenAIChat import Message, OpenAIChat
from services.SwapiQueryService import SwapiQueryService
from settings import CHAT_DEFAULTS, MAX_CONTEXT_CHARS, MAX_TOOL_ROUNDS
from tools.SwapiTools import SwapiTools, extract_entity_ids
from utility.logging_utils import get_class_logger


def _safe_str(x: Any) -> str:
    return "" if x is None else str(x)


def _usage_dict(resp: Any) -> Optional[Dict[str, Any]]:
    usage = getattr(resp, "usage", None)
    if usage is None:
        return None
    if isinstance(usage, dict):
        return usage
    if hasattr(usage, "model_dump"):
        return usage.model_dump()
    return None


@dataclass
class SwapiChatService:
    """
    Chat Service:
        - retrieves relevant entities using SwapiQueryService (hybrid search)
        - builds an instruction + context prompt
        - lets the model call SwapiTools for follow-up lookups
        - returns answer + sources + the tool calls that were made
    """
    query_service: SwapiQueryService
    chat_client: OpenAIChat
    tools: Optional[SwapiTools] = None
    logger: logging.Logger | None = None

    system_prompt: str = (
        "You are a Star Wars trivia assistant.\n"
        "Answer using the provided context about characters, films, planets, starships, "
        "vehicles and species.\n"
        "When the context is not enough, use the available tools to look up entities by id.\n"
        "If you still cannot answer, say so.\n"
    )

    max_context_chars: int = MAX_CONTEXT_CHARS
    max_tool_rounds: int = MAX_TOOL_ROUNDS

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        self.logger.info(
            "SwapiChatService initialised (query_service=%s chat_client=%s tools=%d)",
            type(self.query_service).__name__,
            type(self.chat_client).__name__,
            len(self.tools.names) if self.tools else 0,
        )

    def ask(
        self,
        *,
        question: str,
        limit: int = 5,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> Dict[str, Any]:
        q = (question or "").strip()
        if not q:
            raise ValueError("question must not be empty")

        self.logger.info("ask: question='%s' limit=%d model=%s (start)", q[:120], limit, model)

        hits = self.query_service.query(q, limit)
        context = self.query_service.to_context(hits)
        self.logger.info("ask: retrieved hits=%d", len(context))

        context_block = self._build_context_block(context)
        messages: List[Message] = [
            {"role": "system", "content": self.system_prompt},
            {
                "role": "user",
                "content": (
                    f"QUESTION:\n{q}\n\n"
                    f"CONTEXT (retrieved Star Wars records):\n{context_block}\n\n"
                    f"INSTRUCTIONS:\n"
                    f"- Answer the question.\n"
                    f"- Use tools only when the context is missing details.\n"
                ),
            },
        ]

        temp = CHAT_DEFAULTS["temperature"] if temperature is None else temperature
        mtok = CHAT_DEFAULTS["max_tokens"] if max_tokens is None else max_tokens
        tool_defs = self.tools.definitions() if self.tools else None

        tool_calls: List[Dict[str, Any]] = []
        resp = None
        message = None
        for round_no in range(self.max_tool_rounds + 1):
            offer_tools = tool_defs if round_no < self.max_tool_rounds else None
            resp = self.chat_client.chat(
                messages, temperature=temp, max_tokens=mtok, model=model, tools=offer_tools
            )
            try:
                message = resp.choices[0].message
            except (AttributeError, IndexError) as e:
                self.logger.error("ask: unexpected OpenAI response: %s", e, exc_info=True)
                raise RuntimeError(f"Unexpected OpenAI response format: {e}")

            requested = getattr(message, "tool_calls", None) or []
            if not requested or offer_tools is None:
                break

            messages.append(
                {
                    "role": "assistant",
                    "content": message.content or "",
                    "tool_calls": [
                        {
                            "id": c.id,
                            "type": "function",
                            "function": {"name": c.function.name, "arguments": c.function.arguments},
                        }
                        for c in requested
                    ],
                }
            )
            for c in requested:
                result = self.tools.call(c.function.name, c.function.arguments)
                tool_calls.append({"name": c.function.name, "arguments": c.function.arguments, "result": result})
                messages.append({"role": "tool", "tool_call_id": c.id, "content": result})
            self.logger.info("ask: round %d executed %d tool call(s)", round_no + 1, len(requested))

        answer = _safe_str(getattr(message, "content", None))
        self.logger.info("ask: answer_chars=%d tool_calls=%d (done)", len(answer), len(tool_calls))

        return {
            "question": q,
            "answer": answer,
            "sources": context,
            "entity_ids": extract_entity_ids(context),
            "tool_calls": tool_calls,
            "model": getattr(resp, "model", None),
            "usage": _usage_dict(resp),
        }

    def _build_context_block(self, context: Sequence[Dict[str, Any]]) -> str:
        """
        Turn context items into a prompt-friendly block, capped at max_context_chars.
        """
        parts: List[str] = []
        total = 0

        for i, item in enumerate(context, start=1):
            meta = item.get("metadata") or {}
            header = f"[{i}] {_safe_str(meta.get('entity_type'))} #{_safe_str(meta.get('entity_id'))}"
            relevance = item.get("relevance")
            if isinstance(relevance, (int, float)):
                header += f" relevance={relevance:.4f}"

            chunk = f"{header}\n{_safe_str(item.get('content'))}".strip() + "\n"

            if total + len(chunk) > self.max_context_chars:
                self.logger.warning(
                    "_build_context_block: truncating context at %d chars (limit=%d)",
                    total,
                    self.max_context_chars,
                )
                break

            parts.append(chunk)
            total += len(chunk)

        if not parts:
            return "(no retrieved context)"

        return "\n---\n".join(parts)
