"""
Shared Dependencies
Configuration and clients shared across all routes
"""
import os
from typing import Optional
from testgen.config import Config
from testgen.llm_client import GeminiClient
import logging

logger = logging.getLogger(__name__)

# Global variables (initialized on startup)
config: Optional[Config] = None
gemini_client: Optional[GeminiClient] = None


def get_config() -> Config:
    """Get Config instance, loading it on first use"""
    if config is None:
        initialize_services()
    return config


def get_gemini_client() -> GeminiClient:
    """Get Gemini client instance"""
    if gemini_client is None:
        initialize_services()
    return gemini_client


def initialize_services(config_path: Optional[str] = None):
    """Load configuration and create the Gemini client"""
    global config, gemini_client

    try:
        config = Config(config_path or os.getenv("TESTGEN_CONFIG", "config.yaml"))

        llm_config = config.get_llm_config()
        gemini_client = GeminiClient(llm_config)

        if gemini_client.is_configured:
            logger.info(f"Gemini proxy ready (model: {llm_config['model']})")
        else:
            logger.warning("GEMINI_API_KEY is not set - /api/gemini will return 500 until it is configured")

        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}")
        raise
