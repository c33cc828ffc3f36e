from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from app.core.config import settings
from app.core.logging import setup_logging
from app.apis.flows.main import router as flows_router
from app.modules.ai.errors import FlowErrorCategory

import uvicorn
from fastapi.middleware.cors import CORSMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    try:
        yield
    finally:
        app.state.ai_client = None


async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = sorted(
        {
            ".".join(str(p) for p in err["loc"] if p != "body") or "body"
            for err in exc.errors()
        }
    )
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "data": None,
            "error": f"Request is missing or has invalid field(s): {', '.join(fields)}",
            "errorCode": FlowErrorCategory.SCHEMA_MISMATCH.value,
        },
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app.name, version=settings.app.version, lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(flows_router)

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "app": settings.app.name,
            "version": settings.app.version,
        }

    return app


app = create_app()


if __name__ == "__main__":
    try:
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=settings.app.port,
            reload=not settings.app.is_production,
        )
    except Exception as e:
        print(f"An error occurred when starting the server: {e}.")
