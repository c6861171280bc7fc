# start_app.py
"""Load the environment and launch the canteen API server."""

from __future__ import annotations

import argparse
import os
import sys

import uvicorn
from dotenv import load_dotenv

import config


def main(argv: list[str] | None = None) -> None:
    """Load ``.env`` and settings, then serve the API with uvicorn."""

    parser = argparse.ArgumentParser()
    parser.add_argument("--host", default="0.0.0.0")  # nosec B104: bind for local development
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument(
        "--reload", action="store_true", help="Restart the server on code changes"
    )
    parser.add_argument(
        "--storage",
        choices=[b.value for b in config.StorageBackendName],
        help="Override STORAGE_BACKEND for this run",
    )
    args = parser.parse_args(argv)

    load_dotenv()  # load environment variables from a .env file

    if args.storage:
        os.environ["STORAGE_BACKEND"] = args.storage
    config.get_settings.cache_clear()
    settings = config.get_settings()  # fail fast on invalid configuration
    if not settings.cashfree_app_id or not settings.cashfree_secret_key:
        print(
            "Cashfree credentials missing; gateway payments will be rejected",
            file=sys.stderr,
        )

    try:
        uvicorn.run(
            "canteen.app.main:app",
            host=args.host,
            port=args.port or int(os.getenv("PORT", "8000")),
            reload=args.reload,
            log_level="info",
        )
    except ModuleNotFoundError as exc:
        print(f"cannot start: module {exc.name or exc} is not installed", file=sys.stderr)
        print("install the project first: pip install -e .", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
