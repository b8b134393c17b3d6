"""
Gemini API Client

Thin layer over LangChain's ChatGoogleGenerativeAI used by the oncology
assistant. Adds a prompt cache, call statistics and an "unavailable" mode
for deployments without an API key. Output is decision-support text only.
"""
import hashlib
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from doctorpath.config import settings
from doctorpath.utils import get_logger

logger = get_logger(__name__)

CACHE_TTL_SECONDS = 900
CACHE_MAX_ENTRIES = 500


@dataclass
class GeminiConfig:
    """Client configuration; unset fields come from settings."""
    api_key: Optional[str] = field(default_factory=lambda: settings.gemini_api_key)
    model: str = field(default_factory=lambda: settings.gemini_model)
    temperature: float = field(default_factory=lambda: settings.gemini_temperature)
    max_output_tokens: int = field(default_factory=lambda: settings.gemini_max_output_tokens)
    request_timeout_seconds: int = field(default_factory=lambda: settings.gemini_timeout_seconds)
    max_retries: int = 2


@dataclass
class GeminiResponse:
    """One model reply. On failure `text` is empty and `error` says why."""
    text: str
    model: str
    finish_reason: str = "STOP"
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: float = 0.0
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None and bool(self.text)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "model": self.model,
            "finish_reason": self.finish_reason,
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "latency_ms": round(self.latency_ms, 2),
            "error": self.error,
        }


class ResponseCache:
    """Prompt-keyed text cache with a TTL, evicting least recently used entries."""

    def __init__(self, ttl_seconds: float = CACHE_TTL_SECONDS, max_entries: int = CACHE_MAX_ENTRIES):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, Tuple[float, str]]" = OrderedDict()

    @staticmethod
    def key_for(prompt: str, system_instruction: Optional[str]) -> str:
        # Whitespace differences should not miss the cache
        normalized = " ".join(prompt.split())
        return hashlib.md5(f"{system_instruction or ''}\x00{normalized}".encode()).hexdigest()

    def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, text = entry
        if time.monotonic() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return text

    def put(self, key: str, text: str) -> None:
        self._entries[key] = (time.monotonic(), text)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def __len__(self) -> int:
        return len(self._entries)


class GeminiClient:
    """
    Client for the Google Gemini API.

    Without an API key the client is unavailable: every call returns a
    GeminiResponse with `error` set and callers decide whether that is
    fatal. Model exceptions are converted the same way and never escape.
    """

    def __init__(self, config: Optional[GeminiConfig] = None, llm: Optional[Any] = None):
        """
        Args:
            config: Optional configuration, built from settings if omitted
            llm: Ready LangChain chat model; skips building one from config
        """
        self.config = config or GeminiConfig()
        self.cache = ResponseCache()
        self._llm = llm if llm is not None else self._build_llm()
        self._request_count = 0
        self._error_count = 0
        self._last_request_at: Optional[datetime] = None

    def _build_llm(self) -> Optional[Any]:
        if not self.config.api_key:
            logger.warning("GEMINI_API_KEY not set; AI generation disabled")
            return None
        try:
            llm = ChatGoogleGenerativeAI(
                model=self.config.model,
                temperature=self.config.temperature,
                max_output_tokens=self.config.max_output_tokens,
                timeout=self.config.request_timeout_seconds,
                max_retries=self.config.max_retries,
                google_api_key=self.config.api_key,
            )
        except Exception as e:
            logger.error(f"Could not create Gemini chat model: {e}")
            return None
        logger.info(f"Gemini chat model ready: {self.config.model}")
        return llm

    @property
    def is_available(self) -> bool:
        return self._llm is not None

    # ── Response helpers ─────────────────────────────────────────────────

    def _failure(self, finish_reason: str, error: str) -> GeminiResponse:
        return GeminiResponse(text="", model=self.config.model, finish_reason=finish_reason, error=error)

    def _messages(self, prompt: str, system_instruction: Optional[str]) -> List[Any]:
        if system_instruction:
            return [SystemMessage(content=system_instruction), HumanMessage(content=prompt)]
        return [HumanMessage(content=prompt)]

    @staticmethod
    def _reply_text(reply: Any) -> str:
        content = getattr(reply, "content", reply)
        if isinstance(content, list):
            # Gemini may return content blocks instead of a plain string
            return "".join(
                block.get("text", "") if isinstance(block, dict) else str(block) for block in content
            )
        return str(content)

    def _from_cache(self, cache_key: Optional[str]) -> Optional[GeminiResponse]:
        text = self.cache.get(cache_key) if cache_key else None
        if text is None:
            return None
        logger.debug(f"Gemini cache hit {cache_key[:8]}")
        return GeminiResponse(text=text, model=self.config.model, finish_reason="CACHED")

    def _complete(self, reply: Any, started: float, cache_key: Optional[str]) -> GeminiResponse:
        self._request_count += 1
        self._last_request_at = datetime.now()

        text = self._reply_text(reply)
        usage = getattr(reply, "usage_metadata", None) or {}
        response = GeminiResponse(
            text=text,
            model=self.config.model,
            prompt_tokens=usage.get("input_tokens", 0),
            completion_tokens=usage.get("output_tokens", 0),
            latency_ms=(time.monotonic() - started) * 1000,
            error=None if text else "No response generated",
        )
        if response.success and cache_key:
            self.cache.put(cache_key, text)
        return response

    def _failed(self, e: Exception) -> GeminiResponse:
        self._request_count += 1
        self._error_count += 1
        self._last_request_at = datetime.now()
        logger.error(f"Gemini call failed: {e}")
        return self._failure("ERROR", f"Request failed: {e}")

    # ── Generation ───────────────────────────────────────────────────────

    def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        use_cache: bool = True
    ) -> GeminiResponse:
        """
        Generate a reply synchronously.

        Args:
            prompt: The user prompt
            system_instruction: Optional system message sent ahead of the prompt
            use_cache: Serve repeated prompts from the cache

        Returns:
            GeminiResponse; `error` is set when the model is unavailable or fails.
        """
        if not self.is_available:
            return self._failure("UNAVAILABLE", "Gemini API key not configured")

        cache_key = ResponseCache.key_for(prompt, system_instruction) if use_cache else None
        cached = self._from_cache(cache_key)
        if cached is not None:
            return cached

        started = time.monotonic()
        try:
            reply = self._llm.invoke(self._messages(prompt, system_instruction))
        except Exception as e:
            return self._failed(e)
        return self._complete(reply, started, cache_key)

    async def generate_async(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        use_cache: bool = True
    ) -> GeminiResponse:
        """Same as `generate`, awaiting the model so the event loop stays free."""
        if not self.is_available:
            return self._failure("UNAVAILABLE", "Gemini API key not configured")

        cache_key = ResponseCache.key_for(prompt, system_instruction) if use_cache else None
        cached = self._from_cache(cache_key)
        if cached is not None:
            return cached

        started = time.monotonic()
        try:
            reply = await self._llm.ainvoke(self._messages(prompt, system_instruction))
        except Exception as e:
            return self._failed(e)
        return self._complete(reply, started, cache_key)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "is_available": self.is_available,
            "model": self.config.model,
            "request_count": self._request_count,
            "error_count": self._error_count,
            "cache_entries": len(self.cache),
            "last_request": self._last_request_at.isoformat() if self._last_request_at else None,
        }
