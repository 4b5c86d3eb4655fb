import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.api.v1.prompts import build_content_prompt, build_photo_prompt
from app.api.v1.response_interpreter import ResponseInterpreter
from app.schemas.plant_care import (
    AnalyzePhotoRequest,
    GenerateContentRequest,
    InterpretRequest,
)
from app.services.vision_client import VisionClient, VisionClientError

logger = logging.getLogger(__name__)

router = APIRouter()


# -------------------------------
# Dependencies (built once in create_app)
# -------------------------------
def get_vision_client(request: Request) -> VisionClient | None:
    return request.app.state.vision_client


def get_interpreter(request: Request) -> ResponseInterpreter:
    return request.app.state.interpreter


def _error(status_code, message, **extra):
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _complete_and_interpret(client, interpreter, prompt, base64_image=None, action="Plant analysis"):
    try:
        if client is None:
            raise VisionClientError("OPENAI_API_KEY is not configured")
        content = client.complete(prompt, base64_image=base64_image)
    except Exception as e:
        logger.exception("%s failed", action)
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    logger.info("%s successful", action)
    recommendations = interpreter.interpret(content)
    return {
        "success": True,
        "recommendations": recommendations.model_dump(),
        "rawResponse": content,
    }


@router.post("/analyze-plant-photo")
def analyze_plant_photo(
    req: AnalyzePhotoRequest,
    client: VisionClient | None = Depends(get_vision_client),
    interpreter: ResponseInterpreter = Depends(get_interpreter),
):
    """
    Identify the plant in a base64 JPEG and return a structured care record
    alongside the model's raw reply.
    """
    if not req.base64_image:
        return _error(400, "Base64 image is required")

    logger.info(
        "Starting plant photo analysis (plant name: %s, image length: %d)",
        req.plant_name,
        len(req.base64_image),
    )
    return _complete_and_interpret(
        client, interpreter, build_photo_prompt(req.plant_name), req.base64_image
    )


@router.post("/generate-plant-content")
def generate_plant_content(
    req: GenerateContentRequest,
    client: VisionClient | None = Depends(get_vision_client),
    interpreter: ResponseInterpreter = Depends(get_interpreter),
):
    """Care content for a named plant, no photo involved."""
    if not req.plant_name:
        return _error(400, "Plant name is required")

    logger.info("Generating content for plant: %s %s", req.plant_name, req.species or "")
    return _complete_and_interpret(
        client,
        interpreter,
        build_content_prompt(req.plant_name, req.species),
        action="Plant content generation",
    )


@router.post("/interpret-response")
def interpret_response(
    req: InterpretRequest,
    interpreter: ResponseInterpreter = Depends(get_interpreter),
):
    return interpreter.interpret(req.raw_response).model_dump()
