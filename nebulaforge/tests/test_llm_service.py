"""Tests for LLM service (unit tests, no API calls)."""

import asyncio

import pytest
from nebulaforge.services import llm_service
from nebulaforge.services.llm_service import RefinementCache, _clean_refinement


@pytest.fixture(autouse=True)
def clear_cache():
    llm_service.cache_clear()
    yield
    llm_service.cache_clear()


class TestLocalEnhancement:
    def test_collapses_whitespace(self):
        result = llm_service.build_local_enhancement("  a   red\n robot ")
        assert result.startswith("a red robot. ")

    def test_keeps_existing_period(self):
        result = llm_service.build_local_enhancement("A vase.")
        assert result.startswith("A vase. Ensure")
        assert ".." not in result

    def test_empty(self):
        assert llm_service.build_local_enhancement("   ").startswith("High fidelity 3D asset.")
        assert llm_service.build_local_enhancement(None).startswith("High fidelity 3D asset.")


class TestCleanRefinement:
    def test_plain(self):
        assert _clean_refinement("  A red robot.  ") == "A red robot."

    def test_fences_and_quotes(self):
        assert _clean_refinement('```\n"A red robot."\n```') == "A red robot."

    def test_role_prefix(self):
        assert _clean_refinement("Assistant: A red\nrobot.") == "A red robot."

    def test_truncated(self):
        assert len(_clean_refinement("x" * 5000)) == llm_service.MAX_REFINED_CHARS


class TestRefinementCache:
    def test_put_and_get(self):
        cache = RefinementCache(ttl=60)
        cache.put("robot", "claude", "haiku", "A robot.", {"provider": "claude"})
        entry = cache.get("robot", "claude", "haiku")
        assert entry.refined == "A robot."
        assert entry.metadata == {"provider": "claude"}

    def test_key_depends_on_all_parts(self):
        cache = RefinementCache(ttl=60)
        cache.put("a", "claude", "haiku", "A.", {})
        assert cache.get("a", "gemini", "haiku") is None
        assert cache.get("a", "claude", "sonnet") is None

    def test_expired_entry_dropped(self):
        cache = RefinementCache(ttl=60)
        cache.put("robot", "claude", "haiku", "A robot.", {})
        cache.ttl = -1
        assert cache.get("robot", "claude", "haiku") is None
        assert len(cache) == 0

    def test_max_size_drops_least_recent(self):
        cache = RefinementCache(ttl=60, max_size=2)
        cache.put("0", "claude", "haiku", "0", {})
        cache.put("1", "claude", "haiku", "1", {})
        cache.get("0", "claude", "haiku")
        cache.put("2", "claude", "haiku", "2", {})
        assert cache.get("1", "claude", "haiku") is None
        assert cache.get("0", "claude", "haiku") is not None
        assert cache.get("2", "claude", "haiku") is not None

    def test_module_cache_clear(self):
        llm_service._cache.put("k", "claude", "haiku", "v", {})
        assert llm_service.cache_clear() == 1
        assert len(llm_service._cache) == 0


class TestRefinePrompt:
    def test_local_provider(self):
        refined, meta = asyncio.run(llm_service.refine_prompt("vase"))
        assert refined.startswith("vase.")
        assert meta["provider"] == "local"

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown provider"):
            asyncio.run(llm_service.refine_prompt("vase", "gpt"))

    def test_claude_result_cached(self, monkeypatch):
        calls = []

        async def fake_claude(prompt, model):
            calls.append((prompt, model))
            return "A sleek vase.", 0.5

        monkeypatch.setattr(llm_service, "refine_prompt_claude", fake_claude)
        refined, meta = asyncio.run(llm_service.refine_prompt("vase", "claude"))
        assert refined == "A sleek vase."
        assert meta["model"] == "haiku"
        assert meta["cache_hit"] is False

        refined, meta = asyncio.run(llm_service.refine_prompt("vase", "claude"))
        assert meta["cache_hit"] is True
        assert calls == [("vase", "haiku")]

    def test_empty_answers_exhaust_retries(self, monkeypatch):
        async def fake_gemini(prompt, model):
            return "", 0.1

        monkeypatch.setattr(llm_service, "refine_prompt_gemini", fake_gemini)
        with pytest.raises(RuntimeError, match="empty refinement"):
            asyncio.run(llm_service.refine_prompt("vase", "gemini"))

    def test_missing_key(self, monkeypatch):
        monkeypatch.setattr(llm_service, "_claude_client", None)
        monkeypatch.setattr(llm_service.config, "ANTHROPIC_API_KEY", "")
        with pytest.raises(RuntimeError, match="ANTHROPIC_API_KEY"):
            asyncio.run(llm_service.refine_prompt("vase", "claude"))
