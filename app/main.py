from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, settings
from app.core.logging_config import configure_logging
from app.api.v1.router import api_router
from app.api.v1.response_interpreter import PARSER_VERSION, ResponseInterpreter
from app.services.vision_client import VisionClient, build_vision_client


def create_app(
    app_settings: Settings | None = None,
    vision_client: VisionClient | None = None,
) -> FastAPI:
    """
    Build the app. The model client is constructed here, once per process,
    and handed to the routes through app.state; pass `vision_client` to
    inject a different one.
    """
    app_settings = app_settings or settings
    configure_logging(app_settings.log_level)

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = app_settings
    app.state.vision_client = vision_client or build_vision_client(app_settings)
    app.state.interpreter = ResponseInterpreter()

    app.include_router(
        api_router,
        prefix="/api/v1"
    )

    @app.get("/health", tags=["Health"])
    def health_check():
        return {
            "status": "ok",
            "environment": app_settings.app_env,
            "parser_version": PARSER_VERSION,
        }

    return app


app = create_app()
