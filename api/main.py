"""
Proxy Application
Builds the FastAPI proxy: CORS from config.yaml, request logging, and service startup
"""
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import os
import logging

from testgen.config import Config
from .dependencies import initialize_services
from .routes import api_router

logger = logging.getLogger(__name__)

PROXY_METHODS = ["GET", "POST", "OPTIONS"]


def configure_cors(app: FastAPI, config_path: str):
    """Open CORS to any origin in development, otherwise to the configured origins only"""
    try:
        config = Config(config_path)
        development, origins = config.is_development(), config.get_cors_origins()
    except FileNotFoundError:
        logger.warning(f"{config_path} not found - CORS falls back to development mode")
        development, origins = True, []

    if development:
        logger.info("CORS: development mode, any origin may call the proxy")
        # Credentials cannot be combined with a wildcard origin
        app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=False,
                           allow_methods=PROXY_METHODS, allow_headers=["*"])
        return

    logger.info(f"CORS: production mode, {len(origins)} allowed origins")
    app.add_middleware(CORSMiddleware, allow_origins=origins, allow_credentials=True,
                       allow_methods=PROXY_METHODS, allow_headers=["*"])


app = FastAPI(
    title="Jira Test Case Generator Proxy",
    description="Forwards Jira issue lookups and Gemini generation requests so that the Gemini API key never reaches the browser.",
    version="1.0.0"
)

configure_cors(app, os.getenv("TESTGEN_CONFIG", "config.yaml"))


@app.middleware("http")
async def log_proxied_requests(request: Request, call_next):
    """Log method, path and status only; bodies carry credentials"""
    response = await call_next(request)
    if request.url.path.startswith("/api/"):
        logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
    return response


@app.exception_handler(RequestValidationError)
async def proxy_validation_error(request: Request, exc: RequestValidationError):
    """Answer undecodable bodies on the proxy routes in their {"error": ...} shape"""
    if request.url.path.startswith("/api/"):
        logger.warning(f"{request.method} {request.url.path}: unreadable request body")
        return JSONResponse(status_code=400, content={"error": "Request body is not valid JSON."})
    return await request_validation_exception_handler(request, exc)


app.include_router(api_router)


@app.on_event("startup")
async def load_services():
    try:
        initialize_services()
    except Exception as e:
        # Dependencies retry initialization on first use
        logger.error(f"❌ Proxy started without configuration: {e}")
