"""Tests for model/provider normalization and brand classification."""

import pytest

from usage_dashboard.names import (
    BRAND_RULES, MODEL_ALIASES, PROVIDER_ALIASES, NameNormalizer,
    brand_of, normalize_model, normalize_provider,
)


class TestNormalizeModel:
    """Tests for normalize_model."""

    def test_alias_is_mapped(self):
        assert normalize_model("zai-glm-4.6") == "glm-4.6"
        assert normalize_model("claude-opus-4-6-thinking") == "claude-opus-4-6"

    def test_unknown_passes_through(self):
        assert normalize_model("gpt-5-mini") == "gpt-5-mini"

    def test_lookup_is_case_sensitive(self):
        """Only exact alias keys are rewritten."""
        assert normalize_model("ZAI-GLM-4.6") == "ZAI-GLM-4.6"

    @pytest.mark.parametrize("name", list(MODEL_ALIASES) + ["glm-4.6", "gpt-5", "cloud/qwen3", ""])
    def test_idempotent(self, name):
        once = normalize_model(name)
        assert normalize_model(once) == once


class TestNormalizeProvider:
    """Tests for normalize_provider."""

    def test_alias_is_mapped(self):
        assert normalize_provider("cloud") == "OpenRouter"
        assert normalize_provider("opencode-claude") == "opencode"

    def test_unknown_passes_through(self):
        assert normalize_provider("anthropic") == "anthropic"

    @pytest.mark.parametrize("name", list(PROVIDER_ALIASES) + ["OpenRouter", "openai"])
    def test_idempotent(self, name):
        once = normalize_provider(name)
        assert normalize_provider(once) == once

    def test_namespaces_are_independent(self):
        """Model aliases should not apply to providers and vice versa."""
        assert normalize_provider("zai-glm-4.6") == "zai-glm-4.6"
        assert normalize_model("cloud") == "cloud"


class TestBrandOf:
    """Tests for brand_of."""

    @pytest.mark.parametrize("model,brand", [
        ("claude-sonnet-4-5-20250929", "Claude"),
        ("gemini-2.5-pro", "Gemini"),
        ("gpt-5-mini", "OpenAI"),
        ("o3-mini", "OpenAI"),
        ("qwq-32b", "Qwen"),
        ("kimi-k2", "Kimi"),
        ("deepseek-chat", "DeepSeek"),
        ("mixtral-8x7b", "Mistral"),
        ("yi-large", "Yi"),
        ("yi1.5", "Yi"),
        ("abab6.5", "MiniMax"),
    ])
    def test_known_brands(self, model, brand):
        assert brand_of(model) == brand

    def test_case_insensitive(self):
        assert brand_of("Claude-3-Opus") == "Claude"

    def test_alias_resolved_before_matching(self):
        """zai-glm-4.6 only matches GLM after normalization."""
        assert brand_of("zai-glm-4.6") == "GLM"

    def test_namespace_prefix_is_stripped(self):
        assert brand_of("cloud/gemini-2.5-flash") == "Gemini"
        assert brand_of("openrouter/meta-llama/llama-3.1-70b") == "Llama"

    @pytest.mark.parametrize("model", ["unknown-model-xyz", "", "my-finetune", "yiyi"])
    def test_fallback_is_other(self, model):
        assert brand_of(model) == "Other"

    def test_first_match_wins(self):
        """Overlapping rules resolve by list order."""
        normalizer = NameNormalizer(brand_rules=[(r"^gpt", "OpenAI"), (r"^gpt-oss", "Open weights")])
        assert normalizer.brand_of("gpt-oss-20b") == "OpenAI"

        reordered = NameNormalizer(brand_rules=[(r"^gpt-oss", "Open weights"), (r"^gpt", "OpenAI")])
        assert reordered.brand_of("gpt-oss-20b") == "Open weights"

    def test_every_rule_is_reachable(self):
        """Each default rule should be the first match for at least its own example."""
        examples = ["qwen3", "gpt-4o", "claude-3", "moonshot-v1", "glm-4", "deepseek-r1",
                    "gemini-3", "llama-3", "grok-4", "mistral-large", "yi-34b", "doubao-pro",
                    "ernie-4", "hunyuan-t1", "minimax-m2", "spark-max", "baichuan4"]
        assert [brand_of(m) for m in examples] == [brand for _, brand in BRAND_RULES]


class TestNameNormalizer:
    """Tests for NameNormalizer construction."""

    def test_injected_tables(self):
        normalizer = NameNormalizer(model_aliases={"a": "b"}, provider_aliases={"x": "y"})
        assert normalizer.normalize_model("a") == "b"
        assert normalizer.normalize_model("zai-glm-4.6") == "zai-glm-4.6"
        assert normalizer.normalize_provider("x") == "y"

    def test_tables_are_read_only(self):
        normalizer = NameNormalizer()
        with pytest.raises(TypeError):
            normalizer.model_aliases["new"] = "value"

    def test_caller_table_changes_do_not_leak(self):
        table = {"a": "b"}
        normalizer = NameNormalizer(model_aliases=table)
        table["c"] = "d"
        assert normalizer.normalize_model("c") == "c"

    def test_chained_aliases_rejected(self):
        """An alias whose target is itself aliased would break idempotence."""
        with pytest.raises(ValueError):
            NameNormalizer(model_aliases={"a": "b", "b": "c"})

    def test_self_mapping_allowed(self):
        normalizer = NameNormalizer(model_aliases={"a": "b", "b": "b"})
        assert normalizer.normalize_model("a") == "b"
