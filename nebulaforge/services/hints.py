"""Prompt hint extraction: keyword tables to structured generation hints."""

from dataclasses import dataclass
from typing import Literal, Optional

from nebulaforge.models import Environment, GeometryKind
from nebulaforge.presets.keywords import (
    COLOR_KEYWORDS,
    DETAIL_BIAS_KEYWORDS,
    ENVIRONMENT_KEYWORDS,
    GEOMETRY_KEYWORDS,
    MULTI_OBJECT_KEYWORDS,
    SINGLE_OBJECT_KEYWORDS,
    first_match,
    includes_any,
)
from nebulaforge.presets.themes import match_theme

DetailBias = Literal["neutral", "organic", "mechanical"]


@dataclass(frozen=True)
class PromptHints:
    detail_bias: DetailBias = "neutral"
    geometry_preference: Optional[GeometryKind] = None
    palette_override: Optional[tuple[str, ...]] = None
    accent_color: Optional[str] = None
    environment_hint: Optional[Environment] = None
    preferred_theme_id: Optional[str] = None
    mesh_target: Optional[int] = None


def _detail_bias(normalized: str) -> DetailBias:
    for bias, terms in DETAIL_BIAS_KEYWORDS.items():
        if includes_any(normalized, terms):
            return bias
    return "neutral"


def _mesh_target(normalized: str) -> Optional[int]:
    if includes_any(normalized, SINGLE_OBJECT_KEYWORDS):
        return 1
    if includes_any(normalized, MULTI_OBJECT_KEYWORDS):
        return 4
    return None


def analyze_prompt_hints(prompt: str) -> PromptHints:
    """Scan the prompt against every keyword table.

    Each category is independent and first-match-wins, except colors which
    accumulate in table order. Every field may come back empty.
    """
    normalized = prompt.lower()

    colors = tuple(
        hex_color
        for hex_color, terms in COLOR_KEYWORDS.items()
        if includes_any(normalized, terms)
    )
    theme = match_theme(normalized)

    return PromptHints(
        geometry_preference=first_match(normalized, GEOMETRY_KEYWORDS),
        palette_override=tuple(dict.fromkeys(colors)) or None,
        accent_color=colors[0] if colors else None,
        environment_hint=first_match(normalized, ENVIRONMENT_KEYWORDS),
        preferred_theme_id=theme.id if theme else None,
        detail_bias=_detail_bias(normalized),
        mesh_target=_mesh_target(normalized),
    )
