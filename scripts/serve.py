#!/usr/bin/env python3
"""
Run the marketplace HTTP API under uvicorn.

Usage:
  python3 scripts/serve.py [--host HOST] [--port PORT]

Host and port default to the configured api.host / api.port.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Serve the marketplace API")
    p.add_argument("--host", default=None, help="Bind address")
    p.add_argument("--port", type=int, default=None, help="Bind port")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)

    import uvicorn

    from marketplace_api.app import create_app
    from marketplace_config import get_active_config

    config = get_active_config()
    app = create_app(config=config)
    uvicorn.run(
        app,
        host=args.host or config.api.host,
        port=args.port or config.api.port,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
