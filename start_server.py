#!/usr/bin/env python3
"""
Launch the AMC Portal API with uvicorn.
HOST / PORT / RELOAD come from the environment (.env); flags override them.
"""

import argparse
import os

import uvicorn
from dotenv import load_dotenv

from amc_portal.config import get_settings


def parse_args():
    load_dotenv()
    parser = argparse.ArgumentParser(description="Run the AMC Portal API")
    parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "3001")))
    parser.add_argument(
        "--no-reload",
        dest="reload",
        action="store_false",
        default=os.getenv("RELOAD", "true").lower() == "true",
        help="disable auto reload",
    )
    return parser.parse_args()


def main():
    args = parse_args()
    settings = get_settings()

    print(f"🚀 {settings.app_name} ({settings.app_env})")
    print(f"   http://{args.host}:{args.port}  reload={args.reload}")
    print(f"   scheduler={'on' if settings.scheduler_enabled else 'off'}")

    uvicorn.run("main:app", host=args.host, port=args.port, reload=args.reload, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
