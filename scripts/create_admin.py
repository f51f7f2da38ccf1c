#!/usr/bin/env python3
"""
Seed an ADMIN account.

Creates the first administrator so the admin-only endpoints become usable.
Does nothing if a user with the email already exists.

Usage:
    python scripts/create_admin.py --email admin@example.org --password s3cret --name "Admin"
    ADMIN_EMAIL=admin@example.org ADMIN_PASSWORD=s3cret python scripts/create_admin.py
"""

import argparse
import asyncio
import os
import sys

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from backend.db.client import get_supabase_client
from backend.services import user_service
from backend.utils.logging import get_logger

logger = get_logger("create_admin")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the initial ADMIN user")
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL"), help="Admin email (ADMIN_EMAIL)")
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD"), help="Admin password (ADMIN_PASSWORD)")
    parser.add_argument("--name", default=os.getenv("ADMIN_NAME", "Administrator"), help="Display name (ADMIN_NAME)")
    return parser.parse_args(argv)


async def create_admin(email: str, password: str, name: str) -> bool:
    """
    Create the admin unless the email is taken.

    Returns:
        True if a user was created, False if one already existed
    """
    supabase_client = get_supabase_client()

    if await user_service.email_in_use(supabase_client, email):
        logger.info(f"User {email} already exists, nothing to do")
        return False

    user = await user_service.create_user(
        supabase_client,
        name=name,
        email=email,
        role="ADMIN",
        password=password,
    )
    logger.info(f"Admin created: id={user.get('id')} email={user.get('email')}")
    return True


def main(argv=None) -> int:
    args = parse_args(argv)

    if not args.email or not args.password:
        logger.error("Both --email and --password (or ADMIN_EMAIL/ADMIN_PASSWORD) are required")
        return 2

    try:
        asyncio.run(create_admin(args.email, args.password, args.name))
    except Exception as e:
        logger.error(f"Failed to create admin: {e}", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
