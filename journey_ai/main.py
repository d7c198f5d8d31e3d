import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from journey_ai.api.routers import chat, plans
from journey_ai.api.routers import settings as settings_router
from journey_ai.core.config import settings
from journey_ai.core.errors import APIError, error_content
from journey_ai.core.logging import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

GENERIC_PLAN_FAILURE = "Failed to generate travel plan. Please try again."

app = FastAPI(title=settings.project_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(plans.router, prefix=settings.api_v1_prefix)
app.include_router(chat.router, prefix=settings.api_v1_prefix)
app.include_router(settings_router.router, prefix=settings.api_v1_prefix)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    if isinstance(exc, APIError):
        message = str(exc.detail)
        if exc.code == "UPSTREAM_ERROR":
            # The browser shows one generic notification; the upstream reason stays in details.
            message = GENERIC_PLAN_FAILURE
        return JSONResponse(
            status_code=exc.status_code,
            content=error_content(exc.code, message, exc.details),
        )
    code = "NOT_FOUND" if exc.status_code == status.HTTP_404_NOT_FOUND else "VALIDATION_ERROR" if 400 <= exc.status_code < 500 else "INTERNAL_ERROR"
    return JSONResponse(status_code=exc.status_code, content=error_content(code, str(exc.detail)))


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    first_error = exc.errors()[0] if exc.errors() else {}
    loc = first_error.get("loc", [])
    # Drop the leading "body" so the path matches the form field name
    path = ".".join(str(item) for item in loc if item != "body")
    details = {"field": path, "reason": first_error.get("msg")}
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_content("VALIDATION_ERROR", "The request is invalid.", details),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled server error: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_content("INTERNAL_ERROR", "An unexpected server error occurred."),
    )
