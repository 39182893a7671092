#!/usr/bin/env python3
"""Development server runner for the world simulator."""

import argparse

import uvicorn

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the world simulator API server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=9000)
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload on code changes")
    args = parser.parse_args()

    uvicorn.run(
        "worldsim.server.main:app",
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
        log_level="info",
    )
