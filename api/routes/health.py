"""
Health Routes
Liveness and Gemini configuration status
"""
from fastapi import APIRouter, Depends
from datetime import datetime

from testgen.config import Config
from ..dependencies import get_config

router = APIRouter()


@router.get("/", tags=["Health"])
async def root():
    return {
        "message": "Jira Test Case Generator Proxy",
        "endpoints": ["/api/jira", "/api/gemini"],
        "docs_url": "/docs"
    }


@router.get("/health", tags=["Health"])
async def health_check(config: Config = Depends(get_config)):
    """Report whether /api/gemini can serve requests; Jira credentials arrive with each request"""
    llm_config = config.get_llm_config()
    configured = bool(llm_config.get('api_key'))

    return {
        "status": "healthy" if configured else "degraded",
        "checked_at": datetime.now().isoformat(),
        "services": {
            "jira": "per-request credentials",
            "gemini": f"configured ({llm_config['model']})" if configured
            else "error: GEMINI_API_KEY not configured"
        }
    }
