"""
API Server
Entry point for running the outbound proxy directly.

    python api_server.py

Equivalent to `python main.py serve`; host and port come from config.yaml.
"""
from api.main import app

__all__ = ["app"]

if __name__ == "__main__":
    import uvicorn
    from testgen.config import Config

    config = Config()
    uvicorn.run(
        app,
        host=str(config.server.get('host', '0.0.0.0')),
        port=int(config.server.get('port', 3001)),
        log_level="info"
    )
