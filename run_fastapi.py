"""
Main entry point for the FastAPI application.

Usage:
    python run_fastapi.py

Or with uvicorn directly:
    uvicorn community_messaging.main:app --host 0.0.0.0 --port 5001 --reload
"""

import os

from dotenv import load_dotenv

load_dotenv()

import uvicorn

if __name__ == "__main__":
    env = os.getenv("APP_ENV", "development")
    debug = env == "development"
    port = int(os.getenv("PORT", 5001))
    host = os.getenv("HOST", "0.0.0.0")

    uvicorn.run(
        "community_messaging.main:app",
        host=host,
        port=port,
        reload=debug,
        log_level="info" if debug else "warning",
    )
