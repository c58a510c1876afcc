#!/usr/bin/env python3
"""Main entry point for the Rostrum debate arena."""

import logging
import os
import sys

from rostrum.config.settings import get_default_config
from rostrum.web.api import create_app


def setup_logging(level: str = "INFO"):
    """Configure logging for the web server."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    # Suppress noisy third-party loggers
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def print_usage():
    """Print usage information for local development."""

    print("Rostrum Debate Arena")
    print("=" * 40)
    print("Available entry points:")
    print()
    print("🌐 Web Server (API + WebSocket):")
    print("   python main.py --web")
    print()
    print("⚙️  Configuration:")
    print("   ROSTRUM_CONFIG=path/to/config.yaml  (default: debate_config.json)")
    print("   OPENROUTER_API_KEY=...              (or set it in the config file)")
    print("   ALLOWED_ORIGINS=https://a,https://b (CORS, default: localhost)")
    print()


def start_web_server():
    """Start the FastAPI web server."""

    config = get_default_config()
    setup_logging(config.system.log_level)

    import uvicorn

    port = int(os.environ.get("PORT", 8000))

    print("🎭 Starting Rostrum Debate Arena...")
    print(f"📡 API Documentation: http://localhost:{port}/docs")
    print(f"🔌 WebSocket: ws://localhost:{port}/ws")

    uvicorn.run(
        create_app(config), host="0.0.0.0", port=port, log_level="info", access_log=True
    )


def main():
    """Main entry point."""
    # Check for production environment (Railway, Docker, Heroku, etc.)
    is_production = any([
        "RAILWAY_ENVIRONMENT" in os.environ,
        "PORT" in os.environ,
        "DYNO" in os.environ,  # Heroku
        os.environ.get("ENVIRONMENT") == "production"
    ])

    if "--help" in sys.argv or "-h" in sys.argv:
        print_usage()
    elif is_production or "--web" in sys.argv:
        start_web_server()
    else:
        print_usage()
        print("💡 Tip: Use 'python main.py --web' to start the server")
        print("🚀 In production, server starts automatically")


if __name__ == "__main__":
    main()
