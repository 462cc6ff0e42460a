"""Canonical model/provider names and brand classification."""

import re
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

# Non-standard model name -> canonical name
MODEL_ALIASES: dict[str, str] = {
    "zai-glm-4.6": "glm-4.6",
    "gpt-oss-120b": "gpt-oss:120b",
    "glm-4.7-free": "glm-4.7",
    "claude-opus-4-6-thinking": "claude-opus-4-6",
}

# Raw provider name -> canonical provider
PROVIDER_ALIASES: dict[str, str] = {
    "cloud": "OpenRouter",
    "opencode-claude": "opencode",
}

# Model prefix pattern -> brand. Evaluated top to bottom, first match wins.
BRAND_RULES: list[tuple[str, str]] = [
    (r"^(qwen|qwq)", "Qwen"),
    (r"^(gpt|o1|o3|chatgpt)", "OpenAI"),
    (r"^claude", "Claude"),
    (r"^(moonshot|kimi)", "Kimi"),
    (r"^(glm|chatglm)", "GLM"),
    (r"^deepseek", "DeepSeek"),
    (r"^gemini", "Gemini"),
    (r"^(llama|meta-llama)", "Llama"),
    (r"^grok", "Grok"),
    (r"^(mistral|mixtral|codestral|ministral|devstral)", "Mistral"),
    (r"^(yi-|yi\d)", "Yi"),
    (r"^(doubao|skylark)", "Doubao"),
    (r"^(ernie|wenxin)", "ERNIE"),
    (r"^hunyuan", "Hunyuan"),
    (r"^(minimax|abab)", "MiniMax"),
    (r"^(spark|xunfei)", "Spark"),
    (r"^baichuan", "Baichuan"),
]

OTHER_BRAND = "Other"


def _frozen_aliases(aliases: Mapping[str, str], kind: str) -> Mapping[str, str]:
    """Copy an alias table into a read-only mapping, rejecting chained aliases."""
    table = dict(aliases)
    for raw, canonical in table.items():
        if canonical in table and table[canonical] != canonical:
            raise ValueError(
                f"{kind} alias {raw!r} -> {canonical!r} is not canonical: "
                f"{canonical!r} is itself mapped to {table[canonical]!r}"
            )
    return MappingProxyType(table)


class NameNormalizer:
    """
    Maps raw provider/model identifiers to canonical names and brands.

    Alias tables and brand rules are fixed at construction, so one instance
    can be shared freely between requests.
    """

    def __init__(
        self,
        model_aliases: Optional[Mapping[str, str]] = None,
        provider_aliases: Optional[Mapping[str, str]] = None,
        brand_rules: Optional[Iterable[tuple[str, str]]] = None,
    ):
        self.model_aliases = _frozen_aliases(
            MODEL_ALIASES if model_aliases is None else model_aliases, "model"
        )
        self.provider_aliases = _frozen_aliases(
            PROVIDER_ALIASES if provider_aliases is None else provider_aliases, "provider"
        )
        self.brand_rules: tuple[tuple[re.Pattern, str], ...] = tuple(
            (re.compile(pattern, re.IGNORECASE), brand)
            for pattern, brand in (BRAND_RULES if brand_rules is None else brand_rules)
        )

    def normalize_model(self, raw: str) -> str:
        return self.model_aliases.get(raw, raw)

    def normalize_provider(self, raw: str) -> str:
        return self.provider_aliases.get(raw, raw)

    def brand_of(self, raw: str) -> str:
        """
        Classify a model name into a brand.

        The model is normalized and lowercased first, and any "namespace/"
        prefix (e.g. "cloud/" or "meta-llama/") is dropped before matching.
        """
        name = self.normalize_model(raw).lower()
        name = name.rsplit("/", 1)[-1]
        for pattern, brand in self.brand_rules:
            if pattern.match(name):
                return brand
        return OTHER_BRAND


default_normalizer = NameNormalizer()


def normalize_model(raw: str) -> str:
    return default_normalizer.normalize_model(raw)


def normalize_provider(raw: str) -> str:
    return default_normalizer.normalize_provider(raw)


def brand_of(raw: str) -> str:
    return default_normalizer.brand_of(raw)
