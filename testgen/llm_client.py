import copy
import logging
from typing import Optional, Dict, Any

import requests

from .errors import ConfigurationMissing, RemoteRequestFailed

logger = logging.getLogger(__name__)

JSON_MIME_TYPE = "application/json"


def build_generation_payload(prompt: str,
                             generation_config: Optional[Dict[str, Any]] = None,
                             response_schema: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Build a single-turn Gemini generateContent request body.

    A response schema is merged into generationConfig together with the JSON MIME type,
    overriding any values already present there. Arguments are not modified.
    """
    payload: Dict[str, Any] = {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}]
    }

    if generation_config is not None:
        payload["generationConfig"] = copy.deepcopy(generation_config)

    if response_schema is not None:
        payload["generationConfig"] = {
            **payload.get("generationConfig", {}),
            "responseMimeType": JSON_MIME_TYPE,
            "responseSchema": copy.deepcopy(response_schema)
        }

    return payload


class GeminiClient:
    """Google Gemini REST client holding the server-side API key"""

    def __init__(self, config: dict, session: Optional[requests.Session] = None):
        self.api_key = config.get('api_key')
        self.model = config.get('model')
        self.base_url = (config.get('base_url') or '').rstrip('/')
        self.timeout = config.get('timeout', 60)
        self.session = session or requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})
        logger.debug(f"GeminiClient initialized: model={self.model}, base_url={self.base_url}")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def generate(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send a generateContent request and return Gemini's JSON response unchanged.

        Raises:
            ConfigurationMissing: If no API key is configured
            RemoteRequestFailed: If Gemini answers with a non-success status
            requests.exceptions.RequestException: If Gemini cannot be reached
        """
        if not self.api_key:
            raise ConfigurationMissing("Gemini API Key not configured on the server.")

        schema_mode = "json" if payload.get("generationConfig", {}).get("responseMimeType") == JSON_MIME_TYPE else "text"
        logger.info(f"Calling Gemini model {self.model} ({schema_mode} mode)")

        response = self.session.post(
            self.get_endpoint(),
            params={'key': self.api_key},
            json=payload,
            timeout=self.timeout
        )
        if not response.ok:
            logger.warning(f"Gemini returned {response.status_code}")
            raise RemoteRequestFailed(
                f"Gemini API Error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text
            )

        return response.json()
