#!/usr/bin/env python3
"""
HoldemTutor - Server Startup Script

Usage:
    python run.py [--host HOST] [--port PORT] [--reload]
                  [--difficulty {easy,medium,hard}] [--language {en,es}] [--seed N]
"""

import argparse
import os

import uvicorn

from holdemtutor.core.rules import ENV_PREFIX


def main():
    parser = argparse.ArgumentParser(description="HoldemTutor Server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--difficulty", choices=["easy", "medium", "hard"], help="Teacher difficulty")
    parser.add_argument("--language", choices=["en", "es"], help="Teaching message language")
    parser.add_argument("--seed", type=int, help="Seed for shuffles and Teacher decisions")
    args = parser.parse_args()

    # Passed through the environment so reload workers see them too
    for name in ("difficulty", "language", "seed"):
        value = getattr(args, name)
        if value is not None:
            os.environ[ENV_PREFIX + name.upper()] = str(value)

    uvicorn.run(
        "holdemtutor.server.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
