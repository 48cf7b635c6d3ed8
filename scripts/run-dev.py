"""
FastAPI Development Server

Runs the Advisor Assistant API with auto-reload.

Usage:
    python scripts/run-dev.py [--host 0.0.0.0] [--port 8000] [--no-reload]
"""

import sys
import os
import argparse
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
os.chdir(project_root)

import uvicorn
from loguru import logger

from src.config.settings import settings


def main():
    """Start the FastAPI development server"""
    parser = argparse.ArgumentParser(description="Run the advisor assistant API in development mode")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload")
    args = parser.parse_args()

    base_url = f"http://localhost:{args.port}"
    logger.info("=" * 80)
    logger.info(f"{settings.assistant_name} - Advisor Assistant API ({settings.llm_provider})")
    logger.info("=" * 80)
    logger.info(f"Docs: {base_url}/docs | Health: {base_url}/health | Chat: POST {base_url}/api/chat")

    if not settings.resolve_path(settings.seed_data_path).exists():
        logger.warning("No seed data yet; generate it with: python scripts/seed_demo_data.py")

    uvicorn.run(
        "src.api.app:app",
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
        log_level=settings.log_level.lower(),
        access_log=True,
        reload_dirs=[str(project_root / "src")]
    )


if __name__ == "__main__":
    main()
