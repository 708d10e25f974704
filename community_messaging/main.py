"""
ASGI entry point.

    uvicorn community_messaging.main:app --host 0.0.0.0 --port 5001
"""

from community_messaging.config.logging_config import setup_logging
from community_messaging.config.settings import Config
from community_messaging.fastapi_app import create_fastapi_app

setup_logging(Config.LOG_LEVEL, Config.LOG_PATH)

app = create_fastapi_app()
