#!/usr/bin/env python3
"""
Start the embeddings HTTP API with uvicorn.
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn

from embedstore.core.config import LOG_LEVEL, validate_config
from embedstore.util.logging import configure_logging


def main():
    parser = argparse.ArgumentParser(description="Serve the embedding store API")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    configure_logging(LOG_LEVEL)

    issues = validate_config()
    if issues:
        for issue in issues:
            print(f"❌ {issue}")
        sys.exit(1)

    uvicorn.run(
        "embedstore.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
