"""Pydantic models for the NebulaForge blueprint API."""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

GeometryKind = Literal["sphere", "box", "torus", "cylinder", "cone", "icosahedron"]
Environment = Literal["studio", "city", "sunset", "nebula"]
Vec3 = tuple[float, float, float]


class _Record(BaseModel):
    """Immutable record serialised with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ── Geometry ────────────────────────────────────────────────────


class SphereGeometry(_Record):
    type: Literal["sphere"] = "sphere"
    radius: float
    width_segments: int = Field(..., ge=3)
    height_segments: int = Field(..., ge=2)


class BoxGeometry(_Record):
    type: Literal["box"] = "box"
    width: float
    height: float
    depth: float


class TorusGeometry(_Record):
    type: Literal["torus"] = "torus"
    radius: float
    tube: float
    radial_segments: int = Field(..., ge=3)
    tubular_segments: int = Field(..., ge=3)
    arc: float


class CylinderGeometry(_Record):
    type: Literal["cylinder"] = "cylinder"
    radius_top: float
    radius_bottom: float
    height: float
    radial_segments: int = Field(..., ge=3)
    height_segments: int = Field(..., ge=1)
    open_ended: bool = False


class ConeGeometry(_Record):
    type: Literal["cone"] = "cone"
    radius: float
    height: float
    radial_segments: int = Field(..., ge=3)
    height_segments: int = Field(..., ge=1)


class IcosahedronGeometry(_Record):
    type: Literal["icosahedron"] = "icosahedron"
    radius: float
    detail: int = Field(..., ge=0)


Geometry = Annotated[
    Union[
        SphereGeometry,
        BoxGeometry,
        TorusGeometry,
        CylinderGeometry,
        ConeGeometry,
        IcosahedronGeometry,
    ],
    Field(discriminator="type"),
]


# ── Mesh ────────────────────────────────────────────────────────


class Material(_Record):
    color: str
    metalness: float = Field(..., ge=0.0, le=1.0)
    roughness: float = Field(..., ge=0.0, le=1.0)
    emissive: Optional[str] = None
    wireframe: Optional[bool] = None
    use_texture: Optional[bool] = None


class Transform(_Record):
    position: Vec3 = (0.0, 0.0, 0.0)
    rotation: Vec3 = (0.0, 0.0, 0.0)
    scale: Vec3 = (1.0, 1.0, 1.0)


IDENTITY_TRANSFORM = Transform()


class Modifiers(_Record):
    noise_amplitude: Optional[float] = None
    noise_frequency: Optional[float] = None
    noise_offset: Optional[float] = None
    twist_strength: Optional[float] = None
    taper_strength: Optional[float] = None
    squash: Optional[float] = None


class Mesh(_Record):
    id: str
    name: str
    geometry: Geometry
    material: Material
    transform: Transform
    modifiers: Optional[Modifiers] = None


class Blueprint(_Record):
    prompt: str
    seed: int
    environment: Environment
    accent_color: str
    meshes: tuple[Mesh, ...]

    def to_json_dict(self) -> dict:
        """Render the document consumed by the viewer."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ── HTTP payloads ───────────────────────────────────────────────


class RefinePromptRequest(BaseModel):
    prompt: Optional[str] = None
    # None means config.DEFAULT_PROVIDER
    provider: Optional[Literal["local", "claude", "gemini"]] = None
    model: Optional[str] = None


class RefinePromptResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    refined_prompt: str
    source: str
    error: Optional[str] = None


class GenerateModelRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    prompt: Optional[str] = None
    reference_image_base64: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = ""
    version: str = ""
    providers: dict = {}
