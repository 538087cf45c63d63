"""Hand-authored shape templates triggered by exact phrases in the prompt.

A template replaces the whole theme pipeline. It only borrows the resolved
palette and accent for coloring and draws one value per part from the shared
stream for the part id.
"""

import math
from dataclasses import dataclass
from typing import Callable, Optional

from nebulaforge.models import (
    BoxGeometry,
    CylinderGeometry,
    Environment,
    Material,
    Mesh,
    Modifiers,
    Transform,
)
from nebulaforge.services.rng import SeededRandom

TEMPLATE_DEFAULT_PALETTE = ("#d4b48c", "#1f1f1f", "#f5f5f5")


@dataclass(frozen=True)
class TemplateContext:
    palette: tuple[str, ...]
    accent_color: str
    rng: SeededRandom


@dataclass(frozen=True)
class ShapeTemplate:
    id: str
    keywords: tuple[str, ...]
    build_meshes: Callable[[TemplateContext], list[Mesh]]
    environment: Optional[Environment] = None


def template_id(prefix: str, rng: SeededRandom) -> str:
    return f"{prefix}-{rng.suffix()}"


def _build_cricket_bat(ctx: TemplateContext) -> list[Mesh]:
    colors = ctx.palette or TEMPLATE_DEFAULT_PALETTE
    wood = colors[0]
    grip = colors[1] if len(colors) > 1 else "#171717"
    sticker = ctx.accent_color

    blade = Mesh(
        id=template_id("bat-blade", ctx.rng),
        name="Cricket-Blade",
        geometry=BoxGeometry(width=0.45, height=2.2, depth=0.32),
        transform=Transform(
            position=(0.0, 0.4, 0.0),
            rotation=(-math.pi * 0.02, 0.0, math.pi * 0.05),
        ),
        material=Material(
            color=wood, metalness=0.08, roughness=0.72, wireframe=False, use_texture=True,
        ),
        modifiers=Modifiers(taper_strength=0.3, squash=0.12, noise_amplitude=0.015),
    )
    handle = Mesh(
        id=template_id("bat-handle", ctx.rng),
        name="Cricket-Handle",
        geometry=CylinderGeometry(
            radius_top=0.12,
            radius_bottom=0.15,
            height=1.5,
            radial_segments=48,
            height_segments=1,
            open_ended=False,
        ),
        transform=Transform(
            position=(0.0, 1.35, -0.05),
            rotation=(math.pi / 2, 0.0, 0.0),
        ),
        material=Material(
            color=grip, metalness=0.05, roughness=0.45, wireframe=False, use_texture=False,
        ),
        modifiers=Modifiers(twist_strength=0.25, noise_amplitude=0.03),
    )
    logo_panel = Mesh(
        id=template_id("bat-cap", ctx.rng),
        name="Bat-Logo-Panel",
        geometry=BoxGeometry(width=0.4, height=0.9, depth=0.05),
        transform=Transform(
            position=(0.0, 0.2, 0.18),
            rotation=(0.0, 0.0, math.pi * 0.05),
        ),
        material=Material(
            color=sticker,
            metalness=0.2,
            roughness=0.4,
            emissive=ctx.accent_color,
            wireframe=False,
            use_texture=False,
        ),
        modifiers=Modifiers(noise_amplitude=0.01),
    )
    return [blade, handle, logo_panel]


SHAPE_TEMPLATES: tuple[ShapeTemplate, ...] = (
    ShapeTemplate(
        id="cricket-bat",
        keywords=("cricket bat", "bat"),
        environment="studio",
        build_meshes=_build_cricket_bat,
    ),
)


def match_template(normalized_prompt: str) -> Optional[ShapeTemplate]:
    for template in SHAPE_TEMPLATES:
        if any(keyword in normalized_prompt for keyword in template.keywords):
            return template
    return None
