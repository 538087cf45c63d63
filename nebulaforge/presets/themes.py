"""Theme presets governing generic (non-templated) generation."""

from dataclasses import dataclass
from typing import Optional

from nebulaforge.models import Environment, GeometryKind


@dataclass(frozen=True)
class ThemeModifiers:
    noise_amplitude: float
    noise_frequency: float
    twist_strength: float
    taper_strength: float
    squash: float


@dataclass(frozen=True)
class ThemePreset:
    id: str
    keywords: tuple[str, ...]
    primary_geometry: GeometryKind
    secondary_geometries: tuple[GeometryKind, ...]
    palette: tuple[str, ...]
    base_metalness: float
    base_roughness: float
    environment: Environment
    accent_color: str
    modifiers: ThemeModifiers


# Catalog order decides keyword precedence ("drone" resolves to mechanical).
THEME_PRESETS: tuple[ThemePreset, ...] = (
    ThemePreset(
        id="mechanical",
        keywords=("robot", "mech", "machine", "engine", "industrial", "drone",
                  "armor", "cyber", "android", "gear", "factory"),
        primary_geometry="box",
        secondary_geometries=("cylinder", "box", "torus"),
        palette=("#94a3b8", "#facc15", "#0f172a", "#cbd5f5"),
        base_metalness=0.85,
        base_roughness=0.25,
        environment="city",
        accent_color="#facc15",
        modifiers=ThemeModifiers(
            noise_amplitude=0.08,
            noise_frequency=2.4,
            twist_strength=0.15,
            taper_strength=0.05,
            squash=0.12,
        ),
    ),
    ThemePreset(
        id="organic",
        keywords=("creature", "biologic", "organic", "flora", "nature", "plant",
                  "beast", "animal", "character", "dragon", "fauna", "alien"),
        primary_geometry="sphere",
        secondary_geometries=("cone", "sphere", "icosahedron"),
        palette=("#34d399", "#0f766e", "#bef264", "#ecfccb"),
        base_metalness=0.2,
        base_roughness=0.7,
        environment="sunset",
        accent_color="#bef264",
        modifiers=ThemeModifiers(
            noise_amplitude=0.35,
            noise_frequency=1.3,
            twist_strength=0.45,
            taper_strength=0.35,
            squash=0.25,
        ),
    ),
    ThemePreset(
        id="aero",
        keywords=("spaceship", "jet", "rocket", "craft", "vehicle", "car", "fighter",
                  "aircraft", "shuttle", "hover", "ship", "drone"),
        primary_geometry="cylinder",
        secondary_geometries=("cone", "box", "torus"),
        palette=("#60a5fa", "#f8fafc", "#0369a1", "#e0f2fe"),
        base_metalness=0.65,
        base_roughness=0.35,
        environment="studio",
        accent_color="#60a5fa",
        modifiers=ThemeModifiers(
            noise_amplitude=0.12,
            noise_frequency=3.1,
            twist_strength=0.25,
            taper_strength=0.15,
            squash=0.2,
        ),
    ),
    ThemePreset(
        id="abstract",
        keywords=("abstract", "symbol", "glyph", "portal", "totem", "sculpture",
                  "sigil", "icon", "logo", "crystal"),
        primary_geometry="icosahedron",
        secondary_geometries=("torus", "sphere", "cone"),
        palette=("#c084fc", "#a855f7", "#f472b6", "#fdf2f8"),
        base_metalness=0.35,
        base_roughness=0.45,
        environment="nebula",
        accent_color="#c084fc",
        modifiers=ThemeModifiers(
            noise_amplitude=0.28,
            noise_frequency=2.1,
            twist_strength=0.35,
            taper_strength=0.2,
            squash=0.3,
        ),
    ),
)

THEMES_BY_ID = {preset.id: preset for preset in THEME_PRESETS}


def find_theme(theme_id: Optional[str]) -> Optional[ThemePreset]:
    if theme_id is None:
        return None
    return THEMES_BY_ID.get(theme_id)


def match_theme(normalized_prompt: str) -> Optional[ThemePreset]:
    """First preset with a keyword contained in the lower-cased prompt."""
    for preset in THEME_PRESETS:
        if any(keyword in normalized_prompt for keyword in preset.keywords):
            return preset
    return None
