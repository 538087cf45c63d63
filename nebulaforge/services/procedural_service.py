"""Procedural Service - deterministic prompt → blueprint generation.

Everything below seed derivation draws from one ``SeededRandom`` in a fixed
order. Changing the order of any draw changes every later value, so the
composition functions are written to consume the stream exactly as listed in
their docstrings.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

from nebulaforge.models import (
    IDENTITY_TRANSFORM,
    Blueprint,
    BoxGeometry,
    ConeGeometry,
    CylinderGeometry,
    Geometry,
    GeometryKind,
    IcosahedronGeometry,
    Material,
    Mesh,
    Modifiers,
    SphereGeometry,
    TorusGeometry,
    Transform,
)
from nebulaforge.presets.keywords import GEOMETRY_TITLES, VECTOR_NAME_SEEDS
from nebulaforge.presets.templates import (
    TEMPLATE_DEFAULT_PALETTE,
    TemplateContext,
    match_template,
)
from nebulaforge.presets.themes import THEME_PRESETS, ThemePreset, find_theme, match_theme
from nebulaforge.services.hints import DetailBias, PromptHints, analyze_prompt_hints
from nebulaforge.services.rng import SeededRandom, derive_seed, normalize_prompt

logger = logging.getLogger(__name__)

MIN_MESHES = 1
MAX_MESHES = 4
TAU = math.pi * 2

DETAIL_MULTIPLIERS = {"organic": 1.25, "mechanical": 0.65, "neutral": 1.0}
# (metalness shift, roughness shift)
MATERIAL_BIAS = {"organic": (-0.2, 0.2), "mechanical": (0.15, -0.1), "neutral": (0.0, 0.0)}


@dataclass(frozen=True)
class CompositionContext:
    palette: tuple[str, ...]
    accent_color: str
    detail_bias: DetailBias
    primary_geometry: Optional[GeometryKind] = None


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


# ── Theme & palette ─────────────────────────────────────────────


def pick_theme(prompt: str, rng: SeededRandom, hints: Optional[PromptHints] = None) -> ThemePreset:
    """Explicit hinted theme, else first keyword match, else one random draw."""
    if hints is not None:
        explicit = find_theme(hints.preferred_theme_id)
        if explicit is not None:
            return explicit

    matched = match_theme(prompt.lower())
    if matched is not None:
        return matched
    return rng.choice(THEME_PRESETS)


def resolve_palette(theme: ThemePreset, hints: PromptHints) -> tuple[tuple[str, ...], str]:
    """Merge color hints ahead of the theme palette.

    Returns (palette, accent_color).
    """
    if not hints.palette_override:
        return theme.palette, hints.accent_color or theme.accent_color

    merged = tuple(dict.fromkeys(hints.palette_override + theme.palette))
    palette = merged[: max(len(theme.palette), len(merged))]
    return palette, hints.accent_color or palette[0]


def resolve_mesh_count(hints: PromptHints, rng: SeededRandom) -> int:
    """Hinted target, else 2-4 from one draw. Draws nothing when hinted."""
    count = hints.mesh_target if hints.mesh_target is not None else 2 + rng.below(3)
    return int(clamp(count, MIN_MESHES, MAX_MESHES))


# ── Geometry ────────────────────────────────────────────────────


def _sphere(rng: SeededRandom) -> SphereGeometry:
    return SphereGeometry(
        radius=rng.uniform(1.1, 1.8),
        width_segments=32 + rng.below(16),
        height_segments=32 + rng.below(16),
    )


def _box(rng: SeededRandom) -> BoxGeometry:
    return BoxGeometry(
        width=rng.uniform(1, 2.2),
        height=rng.uniform(1, 1.6),
        depth=rng.uniform(1, 2),
    )


def _torus(rng: SeededRandom) -> TorusGeometry:
    return TorusGeometry(
        radius=rng.uniform(1.2, 1.9),
        tube=rng.uniform(0.2, 0.5),
        radial_segments=16 + rng.below(16),
        tubular_segments=48 + rng.below(32),
        arc=TAU,
    )


def _cylinder(rng: SeededRandom) -> CylinderGeometry:
    return CylinderGeometry(
        radius_top=rng.uniform(0.5, 1.2),
        radius_bottom=rng.uniform(0.8, 1.5),
        height=rng.uniform(2, 3.2),
        radial_segments=32 + rng.below(16),
        height_segments=1 + rng.below(3),
        open_ended=False,
    )


def _cone(rng: SeededRandom) -> ConeGeometry:
    return ConeGeometry(
        radius=rng.uniform(0.7, 1.4),
        height=rng.uniform(1.4, 2.4),
        radial_segments=32 + rng.below(16),
        height_segments=1 + rng.below(2),
    )


def _icosahedron(rng: SeededRandom) -> IcosahedronGeometry:
    return IcosahedronGeometry(
        radius=rng.uniform(1.2, 1.7),
        detail=rng.below(2),
    )


GEOMETRY_BUILDERS: dict[str, Callable[[SeededRandom], Geometry]] = {
    "sphere": _sphere,
    "box": _box,
    "torus": _torus,
    "cylinder": _cylinder,
    "cone": _cone,
    "icosahedron": _icosahedron,
}


def create_geometry(kind: GeometryKind, rng: SeededRandom) -> Geometry:
    try:
        builder = GEOMETRY_BUILDERS[kind]
    except KeyError:
        raise ValueError(f"Unknown geometry kind: {kind}") from None
    return builder(rng)


def pick_geometry_kind(
    theme: ThemePreset, rng: SeededRandom, index: int, preferred: Optional[GeometryKind]
) -> GeometryKind:
    if index == 0:
        pool = [preferred or theme.primary_geometry, theme.primary_geometry]
    else:
        pool = ([preferred] if preferred else []) + list(theme.secondary_geometries)

    if pool:
        return rng.choice(pool)
    return rng.choice(theme.secondary_geometries)


# ── Transform / material / modifiers ────────────────────────────


def create_transform(rng: SeededRandom, index: int) -> Transform:
    """Identity for the primary mesh (no draws), nine draws otherwise."""
    if index == 0:
        return IDENTITY_TRANSFORM

    position = (rng.uniform(-1.2, 1.2), rng.uniform(-0.2, 1.2), rng.uniform(-1.1, 1.1))
    rotation = (rng.uniform(-0.4, 0.4), rng.uniform(0, TAU), rng.uniform(-0.4, 0.4))
    scale = (rng.uniform(0.45, 0.9), rng.uniform(0.45, 0.9), rng.uniform(0.45, 0.9))
    return Transform(position=position, rotation=rotation, scale=scale)


def palette_index(rng: SeededRandom, index: int, palette_size: int) -> int:
    if index == 0 or palette_size == 1:
        chosen = 0
    else:
        chosen = 1 + rng.below(max(1, palette_size - 1))
    return int(clamp(chosen, 0, max(0, palette_size - 1)))


def create_modifiers(theme: ThemePreset, rng: SeededRandom, bias: DetailBias) -> Modifiers:
    """Six draws: amplitude, frequency, offset, twist, taper, squash."""
    base = theme.modifiers
    detail = DETAIL_MULTIPLIERS[bias]

    noise_amplitude = base.noise_amplitude * rng.uniform(0.9, 1.4) * detail
    noise_frequency = base.noise_frequency * rng.uniform(0.8, 1.2)
    noise_offset = rng.random() * TAU
    twist_strength = base.twist_strength * rng.uniform(0.7, 1.3) * detail
    taper_strength = base.taper_strength * rng.uniform(0.5, 1.2) * detail
    squash = base.squash * rng.uniform(0.8, 1.2)

    if bias == "mechanical":
        noise_amplitude *= 0.8
        taper_strength *= 0.7
        squash *= 0.6

    return Modifiers(
        noise_amplitude=noise_amplitude,
        noise_frequency=noise_frequency,
        noise_offset=noise_offset,
        twist_strength=twist_strength,
        taper_strength=taper_strength,
        squash=squash,
    )


def create_material(
    theme: ThemePreset, rng: SeededRandom, index: int, color: str, ctx: CompositionContext
) -> Material:
    metal_shift, rough_shift = MATERIAL_BIAS[ctx.detail_bias]
    primary = index == 0
    return Material(
        color=color,
        metalness=clamp(theme.base_metalness + metal_shift, 0.0, 1.0),
        roughness=clamp(theme.base_roughness + rough_shift, 0.0, 1.0),
        emissive=ctx.accent_color if primary else None,
        # secondary meshes only; the primary mesh consumes no draw here
        wireframe=False if primary else rng.random() > 0.85,
        use_texture=primary,
    )


def create_mesh_name(prompt: str, kind: GeometryKind, rng: SeededRandom, index: int) -> str:
    descriptor = next((word for word in prompt.split(" ") if word), "Artifact")
    prefix = rng.choice(VECTOR_NAME_SEEDS)
    title = GEOMETRY_TITLES.get(kind, "Element")
    return f"{prefix}-{title}-{'Prime' if index == 0 else descriptor}"


def create_mesh(
    theme: ThemePreset, prompt: str, rng: SeededRandom, index: int, ctx: CompositionContext
) -> Mesh:
    palette = ctx.palette or theme.palette

    kind = pick_geometry_kind(theme, rng, index, ctx.primary_geometry)
    geometry = create_geometry(kind, rng)
    transform = create_transform(rng, index)
    color = palette[palette_index(rng, index, len(palette))]
    modifiers = create_modifiers(theme, rng, ctx.detail_bias)
    material = create_material(theme, rng, index, color, ctx)
    mesh_id = f"{kind}-{index}-{rng.suffix()}"
    name = create_mesh_name(prompt, kind, rng, index)

    return Mesh(
        id=mesh_id,
        name=name,
        geometry=geometry,
        material=material,
        transform=transform,
        modifiers=modifiers,
    )


# ── Assembly ────────────────────────────────────────────────────


def try_template_blueprint(prompt: str, hints: PromptHints, seed: int) -> Optional[Blueprint]:
    """Build a named-template blueprint, or None when no trigger phrase matches.

    Uses its own stream on the same seed, so the theme pipeline's draws are
    never consumed.
    """
    template = match_template(prompt.lower())
    if template is None:
        return None

    rng = SeededRandom(seed)
    palette = hints.palette_override or TEMPLATE_DEFAULT_PALETTE
    accent_color = hints.accent_color or palette[0]
    meshes = template.build_meshes(
        TemplateContext(palette=palette, accent_color=accent_color, rng=rng)
    )
    logger.debug(f"Template '{template.id}' matched (seed={seed})")

    return Blueprint(
        prompt=prompt,
        seed=seed,
        environment=template.environment or hints.environment_hint or "studio",
        accent_color=accent_color,
        meshes=tuple(meshes),
    )


def generate(prompt: Optional[str] = None) -> Blueprint:
    """Derive a reproducible blueprint from free text.

    Blank or absent prompts are replaced by the default prompt; the call never
    raises for string or None input.
    """
    text = normalize_prompt(prompt)
    seed = derive_seed(text)
    rng = SeededRandom(seed)
    hints = analyze_prompt_hints(text)

    templated = try_template_blueprint(text, hints, seed)
    if templated is not None:
        return templated

    theme = pick_theme(text, rng, hints)
    palette, accent_color = resolve_palette(theme, hints)
    environment = hints.environment_hint or theme.environment
    mesh_count = resolve_mesh_count(hints, rng)

    ctx = CompositionContext(
        palette=palette,
        accent_color=accent_color,
        detail_bias=hints.detail_bias,
        primary_geometry=hints.geometry_preference,
    )
    meshes = tuple(create_mesh(theme, text, rng, i, ctx) for i in range(mesh_count))
    logger.debug(
        f"Generated blueprint seed={seed} theme={theme.id} "
        f"bias={hints.detail_bias} meshes={mesh_count}"
    )

    return Blueprint(
        prompt=text,
        seed=seed,
        environment=environment,
        accent_color=accent_color,
        meshes=meshes,
    )
