"""NebulaForge procedural blueprint FastAPI server."""

import base64
import binascii
import logging
import re
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nebulaforge.models import (
    GenerateModelRequest,
    HealthResponse,
    RefinePromptRequest,
    RefinePromptResponse,
)
from nebulaforge.presets.templates import SHAPE_TEMPLATES
from nebulaforge.presets.themes import THEME_PRESETS
from nebulaforge.services import llm_service, procedural_service
from nebulaforge import config

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="NebulaForge",
    description="Deterministic procedural 3D blueprints from text prompts",
    version=config.VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

IMAGE_FALLBACK_ERROR = (
    "Image-to-3D service is not available; using procedural fallback"
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    t0 = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = round((time.perf_counter() - t0) * 1000, 2)
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms}ms)")
    return response


def _decode_image(data: str) -> bytes:
    """Decode a base64 image, accepting an optional data URL prefix."""
    payload = data.split(",", 1)[1] if "," in data else data
    # data URLs are often wrapped across lines
    payload = re.sub(r"\s+", "", payload)
    decoded = base64.b64decode(payload, validate=True)
    if not decoded:
        raise ValueError("Decoded image buffer is empty")
    return decoded


# ── REST Endpoints ──────────────────────────────────────────────


@app.get("/api/health", response_model=HealthResponse)
async def health():
    return HealthResponse(
        status="ok",
        service=config.SERVICE_NAME,
        version=config.VERSION,
        providers={
            "claude": bool(config.ANTHROPIC_API_KEY),
            "gemini": bool(config.GOOGLE_API_KEY),
        },
    )


@app.post("/api/refine-prompt", response_model=RefinePromptResponse, response_model_exclude_none=True)
async def refine_prompt(req: RefinePromptRequest):
    prompt = req.prompt or ""
    provider = req.provider or config.DEFAULT_PROVIDER
    if provider == "local":
        return RefinePromptResponse(
            refined_prompt=llm_service.build_local_enhancement(prompt),
            source="local",
        )

    try:
        refined, meta = await llm_service.refine_prompt(prompt, provider, req.model)
    except Exception as e:
        logger.warning(f"Refinement via {provider} failed, using local: {e}")
        return RefinePromptResponse(
            refined_prompt=llm_service.build_local_enhancement(prompt),
            source="local",
            error=f"LLM error: {e}",
        )

    return RefinePromptResponse(refined_prompt=refined, source=meta["provider"])


@app.post("/api/generate-model")
async def generate_model(req: GenerateModelRequest):
    logger.info(
        f"Generate model request: prompt_len={len(req.prompt or '')} "
        f"image_len={len(req.reference_image_base64 or '')}"
    )

    if not req.prompt and not req.reference_image_base64:
        return JSONResponse(
            status_code=400,
            content={"error": "Prompt or reference image is required"},
        )

    error = None
    if req.reference_image_base64:
        try:
            _decode_image(req.reference_image_base64)
        except (binascii.Error, ValueError) as e:
            logger.warning(f"Invalid base64 image data: {e}")
            return JSONResponse(
                status_code=400,
                content={"error": "Invalid image data. Please ensure the image is properly encoded."},
            )
        error = IMAGE_FALLBACK_ERROR

    blueprint = procedural_service.generate(req.prompt)

    body = {
        "model3DUrl": None,
        "modelSpec": blueprint.to_json_dict(),
        "textureDataUrl": None,
    }
    if error:
        body["error"] = error
    return body


@app.get("/api/themes")
async def themes():
    return {
        "themes": [
            {
                "id": preset.id,
                "keywords": list(preset.keywords),
                "environment": preset.environment,
                "accentColor": preset.accent_color,
            }
            for preset in THEME_PRESETS
        ],
        "templates": [
            {"id": template.id, "keywords": list(template.keywords)}
            for template in SHAPE_TEMPLATES
        ],
    }


# ── Main ────────────────────────────────────────────────────────


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "nebulaforge.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=True,
    )
