import os
import re
import yaml
import logging
from typing import Dict, Any, List
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_APP_ID = 'ai-test-case-generator-app'
DEFAULT_GEMINI_MODEL = 'gemini-2.0-flash'
DEFAULT_GEMINI_BASE_URL = 'https://generativelanguage.googleapis.com/v1beta'
DEFAULT_ACCEPTANCE_CRITERIA_FIELD = 'customfield_10056'


class Config:
    """Configuration manager for the proxy server and the generator clients"""

    def __init__(self, config_path: str = "config.yaml"):
        load_dotenv()
        self.config_path = config_path
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file with environment variable substitution"""
        if not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as file:
            config_content = file.read()

        config_content = self._substitute_env_vars(config_content)

        return yaml.safe_load(config_content) or {}

    def _substitute_env_vars(self, content: str) -> str:
        """Replace ${VAR_NAME} and ${VAR_NAME:default} with environment variables"""
        def replace_var(match):
            var_expr = match.group(1)
            if ':' in var_expr:
                var_name, default_value = var_expr.split(':', 1)
                return os.getenv(var_name, default_value)
            else:
                return os.getenv(var_expr, '')

        return re.sub(r'\$\{([^}]+)\}', replace_var, content)

    @property
    def server(self) -> Dict[str, Any]:
        return self._config.get('server') or {}

    @property
    def llm(self) -> Dict[str, Any]:
        return self._config.get('llm') or {}

    @property
    def jira(self) -> Dict[str, Any]:
        return self._config.get('jira') or {}

    @property
    def proxy(self) -> Dict[str, Any]:
        return self._config.get('proxy') or {}

    @property
    def store(self) -> Dict[str, Any]:
        return self._config.get('store') or {}

    def get_cors_origins(self) -> List[str]:
        """
        Get the list of allowed CORS origins.

        Supports a comma-separated string or a YAML list.
        """
        origins = self.server.get('cors_origins', '')
        if isinstance(origins, str):
            return [o.strip() for o in origins.split(',') if o.strip()]
        if isinstance(origins, list):
            return [o for o in origins if o and isinstance(o, str)]
        return []

    def is_development(self) -> bool:
        return str(self.server.get('environment', 'development')).lower() == 'development'

    def get_llm_config(self) -> Dict[str, Any]:
        """Get configuration for the Gemini endpoint used by the proxy"""
        timeout = self.llm.get('timeout', 60)
        try:
            timeout = float(timeout)
        except (ValueError, TypeError):
            logger.warning(f"Invalid llm timeout value: {timeout!r}, using 60 seconds")
            timeout = 60.0

        return {
            'provider': 'gemini',
            'api_key': self.llm.get('google_api_key') or None,
            'model': self.llm.get('google_model') or DEFAULT_GEMINI_MODEL,
            'base_url': (self.llm.get('base_url') or DEFAULT_GEMINI_BASE_URL).rstrip('/'),
            'timeout': timeout
        }

    def get_jira_timeout(self) -> float:
        return float(self.jira.get('timeout', 30) or 30)

    def get_acceptance_criteria_field(self) -> str:
        return self.jira.get('acceptance_criteria_field') or DEFAULT_ACCEPTANCE_CRITERIA_FIELD

    def get_proxy_url(self) -> str:
        return (self.proxy.get('url') or 'http://localhost:3001').rstrip('/')

    def get_proxy_timeout(self) -> float:
        return float(self.proxy.get('timeout', 120) or 120)

    def get_db_path(self) -> str:
        return self.store.get('db_path') or os.path.join('data', 'testgen.db')

    def get_app_id(self) -> str:
        return self.store.get('app_id') or DEFAULT_APP_ID

    def get_default_user_id(self) -> str:
        return self.store.get('user_id') or 'local-user'

    def validate(self) -> bool:
        """Validate that all required configuration is present"""
        errors = []

        if not self.get_llm_config().get('api_key'):
            errors.append("Missing API key for LLM provider: gemini (set GEMINI_API_KEY)")

        try:
            port = int(self.server.get('port', 3001))
            if not 0 < port < 65536:
                errors.append(f"Invalid server port: {port}")
        except (ValueError, TypeError):
            errors.append(f"Invalid server port: {self.server.get('port')!r}")

        if errors:
            for error in errors:
                logger.error(f"Configuration Error: {error}")
            return False

        return True
