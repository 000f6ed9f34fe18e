#!/usr/bin/env python3
"""
Daily Kite Connect login helper.

Kite access tokens expire every morning. This script prints the login URL,
exchanges the request token from the redirect for an access token and
writes KITE_ACCESS_TOKEN into the environment file.

Usage:
  # Print the login URL, then paste the request_token when prompted
  python scripts/kite_auth.py

  # Exchange a token you already have
  python scripts/kite_auth.py --request-token abc123

  # Write to a different env file
  python scripts/kite_auth.py --env-file .env.production
"""

import argparse
import asyncio
import logging
import re
import sys
from pathlib import Path

# Add parent directory to path for local execution
sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog

from src.core.config import ENV, get_settings
from src.core.exceptions import AppError
from src.services.kite import KiteConnectClient

logger = structlog.get_logger()

TOKEN_LINE = re.compile(r"^KITE_ACCESS_TOKEN=.*$", re.MULTILINE)


def write_access_token(env_file: Path, access_token: str) -> None:
    """Replace (or append) the KITE_ACCESS_TOKEN line, keeping other lines."""
    line = f"KITE_ACCESS_TOKEN={access_token}"
    content = env_file.read_text(encoding="utf-8") if env_file.exists() else ""

    if TOKEN_LINE.search(content):
        content = TOKEN_LINE.sub(lambda _: line, content)
    else:
        if content and not content.endswith("\n"):
            content += "\n"
        content += line + "\n"

    env_file.write_text(content, encoding="utf-8")


async def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(description="Refresh the Kite Connect access token")
    parser.add_argument(
        "--request-token",
        type=str,
        help="request_token from the login redirect (prompted when omitted)",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=Path(f".env.{ENV}"),
        help="Environment file to update (default: .env.<ENVIRONMENT>)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    settings = get_settings()

    client = KiteConnectClient(
        api_key=settings.kite_api_key,
        api_secret=settings.kite_api_secret,
        base_url=settings.kite_base_url,
        login_url=settings.kite_login_url,
    )

    try:
        request_token = args.request_token
        if not request_token:
            print("\nOpen this URL, log in and copy request_token from the redirect:\n")
            print(f"  {client.login_url()}\n")
            request_token = input("request_token: ").strip()

        if not request_token:
            print("No request token given", file=sys.stderr)
            sys.exit(1)

        session = await client.generate_session(request_token)
        write_access_token(args.env_file, session.access_token)

        logger.info(
            "Kite access token saved",
            env_file=str(args.env_file),
            user_id=session.user_id,
        )
        print(f"\nAccess token written to {args.env_file}")

    except AppError as e:
        logger.error("Kite login failed", error_type=e.error_type, error=e.message)
        print(f"\nError: {e.message}", file=sys.stderr)
        sys.exit(1)

    finally:
        await client.close()


if __name__ == "__main__":
    asyncio.run(main())
