# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-22
# Updated: 2026-02-06
# Description: OpenAIChat
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import openai
from openai import OpenAI

from errors import ChatAuthError
from utility.logging_utils import get_class_logger

Message = Dict[str, Any]  # {"role": "system"|"user"|"assistant"|"tool", "content": "...", ...}


@dataclass
class OpenAIChat:
    """
        OpenAI chat-completions wrapper.

        Expected Config fields:
          cfg.openai_api_key: str
          cfg.openai_base_url: str (optional)
          cfg.openai_chat_model: str  (e.g. "gpt-4o-mini", "gpt-4o")
    """

    cfg: Any
    client: Any = None
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

        if not getattr(self.cfg, "openai_api_key", None):
            raise ValueError("Config is missing openai_api_key")

        self.model = getattr(self.cfg, "openai_chat_model", None)
        if not self.model:
            raise ValueError("Config missing openai_chat_model.")

        if self.client is None:
            self.client = OpenAI(
                api_key=self.cfg.openai_api_key,
                base_url=getattr(self.cfg, "openai_base_url", None) or None,
            )

        self.logger.info("OpenAIChat initialised (model=%s)", self.model)

    def chat(
            self,
            messages: List[Message],
            temperature: float = 0.0,
            max_tokens: int = 512,
            model: Optional[str] = None,
            tools: Optional[List[Dict[str, Any]]] = None,
            extra_params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        if not messages:
            raise ValueError("messages must be non-empty.")

        params: Dict[str, Any] = {
            "model": model or self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if tools:
            params["tools"] = tools
            params["tool_choice"] = "auto"
        if extra_params:
            params.update(extra_params)

        self.logger.debug(
            "Chat request: model=%s temp=%s max_tokens=%s messages=%d tools=%d",
            params["model"], temperature, max_tokens, len(messages), len(tools or []),
        )

        try:
            resp = self.client.chat.completions.create(**params)
        except openai.AuthenticationError as e:
            self.logger.error("Chat request rejected (authentication): %s", e)
            raise ChatAuthError(f"OpenAI rejected the API key: {e}") from e

        self.logger.debug("Raw ChatCompletion response: %r", resp)

        # Return the full response object (NOT just the content)
        return resp

    def simple_chat(
            self,
            user_text: str,
            system_text: Optional[str] = None,
            **kwargs: Any,
    ) -> dict:
        messages: List[Message] = []
        if system_text:
            messages.append({"role": "system", "content": system_text})
        messages.append({"role": "user", "content": user_text})

        resp = self.chat(messages, **kwargs)

        try:
            content = resp.choices[0].message.content or ""
        except (AttributeError, IndexError) as e:
            self.logger.error("Unexpected chat response format: %s", e, exc_info=True)
            raise RuntimeError(f"Unexpected chat response format: {e}")

        self.logger.info("Chat answer generated (model=%s)", getattr(resp, "model", None))

        return {
            "answer": content,
            "usage": getattr(resp, "usage", None),
            "model": getattr(resp, "model", None),
        }

    def healthcheck(self) -> bool:
        try:
            self.simple_chat("ping", max_tokens=5, temperature=0.0)
            return True
        except Exception as e:
            self.logger.warning("Chat healthcheck failed: %s", e)
            return False
