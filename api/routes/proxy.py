"""
Proxy Routes
Forward Jira issue lookups and Gemini generation requests, keeping the Gemini key on the server
"""
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
import logging
import requests
from typing import Any, Optional, Type, TypeVar

from testgen.config import Config
from testgen.errors import ConfigurationMissing, RemoteRequestFailed
from testgen.jira_client import JiraClient
from testgen.llm_client import GeminiClient, build_generation_payload

from ..dependencies import get_config, get_gemini_client
from ..models.proxy import JiraProxyRequest, GeminiProxyRequest, ProxyErrorResponse

router = APIRouter()
logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

ERROR_RESPONSES = {
    400: {"model": ProxyErrorResponse, "description": "Missing required fields"},
    500: {"model": ProxyErrorResponse, "description": "Proxy or server configuration failure"},
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _request_body(model: Type[ModelT]) -> dict:
    """Document the JSON body in OpenAPI while the handler validates it itself"""
    return {"requestBody": {"content": {"application/json": {"schema": model.model_json_schema(by_alias=True)}}}}


def _parse_body(model: Type[ModelT], body: Any) -> Optional[ModelT]:
    """
    Validate a raw JSON body against a proxy request model.

    A missing body counts as an empty object. Non-object bodies and wrongly
    typed fields return None so the route can answer with its own 400.
    """
    if body is None:
        body = {}
    if not isinstance(body, dict):
        return None
    try:
        return model.model_validate(body)
    except ValidationError as e:
        logger.warning(f"Rejected {model.__name__} body: {e.error_count()} invalid field(s)")
        return None


@router.post("/api/jira",
          tags=["Proxy"],
          summary="Fetch a Jira issue",
          description="Fetch an issue from Jira REST API v3 using the credentials supplied in the request body.",
          responses=ERROR_RESPONSES,
          openapi_extra=_request_body(JiraProxyRequest))
def proxy_jira(body: Any = Body(None), config: Config = Depends(get_config)):
    """Proxy a Jira issue lookup"""
    request = _parse_body(JiraProxyRequest, body)
    if request is None or not request.is_complete():
        return _error(400, "Missing Jira configuration or Issue ID.")

    try:
        jira_client = JiraClient(
            server_url=request.jira_url,
            username=request.jira_username,
            api_token=request.jira_api_token,
            timeout=config.get_jira_timeout()
        )
        return jira_client.get_issue(request.issue_id)
    except ConfigurationMissing:
        return _error(400, "Missing Jira configuration or Issue ID.")
    except RemoteRequestFailed as e:
        return _error(e.status_code or 502, str(e))
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error(f"Error proxying Jira request: {e}")
        return _error(500, "Failed to fetch Jira issue details via proxy.")


@router.post("/api/gemini",
          tags=["Proxy"],
          summary="Generate content with Gemini",
          description="Send a single-turn prompt to Gemini. A responseSchema switches the reply to JSON mode.",
          responses=ERROR_RESPONSES,
          openapi_extra=_request_body(GeminiProxyRequest))
def proxy_gemini(body: Any = Body(None), gemini_client: GeminiClient = Depends(get_gemini_client)):
    """Proxy a Gemini generateContent call"""
    if not gemini_client.is_configured:
        return _error(500, "Gemini API Key not configured on the server.")

    request = _parse_body(GeminiProxyRequest, body)
    if request is None:
        return _error(400, "Invalid request body for Gemini LLM.")
    if not request.prompt:
        return _error(400, "Missing prompt for Gemini LLM.")

    payload = build_generation_payload(
        request.prompt,
        generation_config=request.generation_config,
        response_schema=request.response_schema
    )

    try:
        return gemini_client.generate(payload)
    except RemoteRequestFailed as e:
        return _error(e.status_code or 502, str(e))
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error(f"Error proxying Gemini request: {e}")
        return _error(500, "Failed to generate content with Gemini LLM via proxy.")
