"""LLM Service - Claude/Gemini prompt refinement with a local fallback."""

import asyncio
import logging
import re
import time
from collections import OrderedDict
from dataclasses import dataclass

from nebulaforge.prompts.system_prompt import LOCAL_EMPTY_PROMPT, LOCAL_SUFFIX, SYSTEM_PROMPT
from nebulaforge import config

logger = logging.getLogger(__name__)

PROVIDERS = ("local", "claude", "gemini")
MAX_RETRIES = 2
MAX_REFINED_CHARS = 1200

# ── Lazy Singleton Clients (connection reuse) ─────────────────
_claude_client = None
_gemini_client = None


def _get_claude_client():
    """Get or create singleton AsyncAnthropic client."""
    global _claude_client
    if _claude_client is None:
        if not config.ANTHROPIC_API_KEY:
            raise RuntimeError("ANTHROPIC_API_KEY is not configured")
        import anthropic
        _claude_client = anthropic.AsyncAnthropic(api_key=config.ANTHROPIC_API_KEY)
        logger.info("Claude client initialized (singleton)")
    return _claude_client


def _get_gemini_client():
    """Get or create singleton genai.Client."""
    global _gemini_client
    if _gemini_client is None:
        if not config.GOOGLE_API_KEY:
            raise RuntimeError("GOOGLE_API_KEY is not configured")
        from google import genai
        _gemini_client = genai.Client(api_key=config.GOOGLE_API_KEY)
        logger.info("Gemini client initialized (singleton)")
    return _gemini_client


def build_local_enhancement(prompt: str) -> str:
    """Deterministic refinement used when no LLM is requested or reachable."""
    cleaned = re.sub(r"\s+", " ", prompt or "").strip()
    if not cleaned:
        return LOCAL_EMPTY_PROMPT

    base = cleaned if cleaned.endswith(".") else f"{cleaned}."
    return f"{base} {LOCAL_SUFFIX}"


def _clean_refinement(text: str) -> str:
    """Strip fences, quotes and role prefixes the models sometimes add."""
    text = (text or "").strip()
    if text.startswith("```"):
        lines = text.split("\n")[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        text = "\n".join(lines).strip()
    text = re.sub(r"^(assistant|prompt)\s*:\s*", "", text, flags=re.IGNORECASE)
    text = text.strip().strip('"').strip()
    text = re.sub(r"\s+", " ", text)
    return text[:MAX_REFINED_CHARS]


# ── Refinement Cache ──────────────────────────────────────────


@dataclass(frozen=True)
class CachedRefinement:
    refined: str
    metadata: dict
    created_at: float


class RefinementCache:
    """Refined prompts keyed by (prompt, provider, model).

    Least recently read entries are dropped past ``max_size``; entries older
    than ``ttl`` seconds are treated as missing.
    """

    def __init__(self, ttl: float, max_size: int = 256):
        self.ttl = ttl
        self.max_size = max_size
        self._entries: OrderedDict[tuple[str, str, str], CachedRefinement] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def _expired(self, entry: CachedRefinement, now: float) -> bool:
        return now - entry.created_at > self.ttl

    def get(self, prompt: str, provider: str, model: str) -> CachedRefinement | None:
        key = (prompt, provider, model)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._expired(entry, time.time()):
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return entry

    def put(self, prompt: str, provider: str, model: str, refined: str, metadata: dict) -> None:
        now = time.time()
        key = (prompt, provider, model)
        self._entries[key] = CachedRefinement(refined, metadata, now)
        self._entries.move_to_end(key)
        for stale in [k for k, v in self._entries.items() if self._expired(v, now)]:
            del self._entries[stale]
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count


_cache = RefinementCache(ttl=config.CACHE_TTL_SECONDS)


def cache_clear() -> int:
    """Clear all cached refinements. Returns number of entries cleared."""
    return _cache.clear()


# ── Providers ─────────────────────────────────────────────────


async def refine_prompt_claude(prompt: str, model: str = "haiku") -> tuple[str, float]:
    """Refine a prompt using Claude API.

    Returns (refined_prompt, elapsed_seconds).
    """
    model_id = config.CLAUDE_MODELS.get(model, model)
    client = _get_claude_client()

    t0 = time.perf_counter()
    response = await client.messages.create(
        model=model_id,
        max_tokens=512,
        system=SYSTEM_PROMPT,
        messages=[{"role": "user", "content": prompt}],
    )
    elapsed = time.perf_counter() - t0

    return _clean_refinement(response.content[0].text), elapsed


async def refine_prompt_gemini(prompt: str, model: str = "flash") -> tuple[str, float]:
    """Refine a prompt using Gemini API.

    Returns (refined_prompt, elapsed_seconds).
    """
    model_id = config.GEMINI_MODELS.get(model, model)
    client = _get_gemini_client()

    full_prompt = SYSTEM_PROMPT + "\n\nUser: " + prompt + "\nAssistant:"

    t0 = time.perf_counter()
    response = await client.aio.models.generate_content(
        model=model_id,
        contents=full_prompt,
        config={"max_output_tokens": 512},
    )
    elapsed = time.perf_counter() - t0

    return _clean_refinement(response.text), elapsed


async def refine_prompt(
    prompt: str,
    provider: str = "local",
    model: str | None = None,
) -> tuple[str, dict]:
    """Refine a prompt with the requested provider, retrying empty answers.

    Returns (refined_prompt, metadata).
    """
    if provider not in PROVIDERS:
        raise ValueError(f"Unknown provider: {provider}")
    if provider == "local":
        return build_local_enhancement(prompt), {"provider": "local", "cache_hit": False}
    if provider == "claude":
        model = model or "haiku"
        refine_fn = refine_prompt_claude
    else:
        model = model or "flash"
        refine_fn = refine_prompt_gemini

    cached = _cache.get(prompt, provider, model)
    if cached is not None:
        logger.info(f"Cache hit for prompt: {prompt[:50]}...")
        return cached.refined, {**cached.metadata, "cache_hit": True}

    total_elapsed = 0.0
    last_error = None

    for attempt in range(1 + MAX_RETRIES):
        try:
            refined, elapsed = await refine_fn(prompt, model)
        except Exception as e:
            err_str = str(e)
            # Detect rate limiting and sleep before retry
            if "429" in err_str and attempt < MAX_RETRIES:
                delay_match = re.search(r"retry in (\d+(?:\.\d+)?)s", err_str, re.IGNORECASE)
                wait_sec = float(delay_match.group(1)) if delay_match else 30.0
                logger.info(f"Rate limited, waiting {wait_sec:.0f}s before retry...")
                await asyncio.sleep(wait_sec)
                last_error = "rate limited"
                continue
            raise

        total_elapsed += elapsed
        if not refined:
            last_error = "empty refinement"
            logger.warning(f"Empty refinement (attempt {attempt+1})")
            continue

        metadata = {
            "provider": provider,
            "model": model,
            "llm_time_s": round(total_elapsed, 3),
            "retries": attempt,
            "cache_hit": False,
        }
        _cache.put(prompt, provider, model, refined, metadata)
        return refined, metadata

    raise RuntimeError(f"Refinement failed after {MAX_RETRIES} retries: {last_error}")
