"""
Create a user (if needed) and print a bearer token for it

There is no login endpoint; use this to bootstrap the first staff account
and to get tokens for manual testing.

Usage:
    python scripts/issue_token.py admin --role STAFF --name "Placement Office"
    python scripts/issue_token.py alice --role STUDENT --department CS
"""
import argparse
import asyncio
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))

from app.core.database import AsyncSessionLocal, init_db, close_db  # noqa: E402
from app.core.security import ROLES, create_access_token  # noqa: E402
from app.crud import user_crud  # noqa: E402


def parse_args():
    parser = argparse.ArgumentParser(description="Issue a bearer token")
    parser.add_argument("username", help="Login name")
    parser.add_argument("--role", choices=ROLES, default="STUDENT", help="Role for a new user")
    parser.add_argument("--name", help="Display name (default: username)")
    parser.add_argument("--email", help="Email (default: <username>@example.edu)")
    parser.add_argument("--department", help="Department")
    return parser.parse_args()


async def issue(args) -> str:
    await init_db()
    try:
        async with AsyncSessionLocal() as session:
            user = await user_crud.get_by_username(session, args.username)
            if user is None:
                user = await user_crud.create(session, obj_in={
                    "username": args.username,
                    "name": args.name or args.username,
                    "email": args.email or f"{args.username}@example.edu",
                    "role": args.role,
                    "department": args.department,
                })
                await session.commit()
                print(f"Created {user.role} user {user.username} ({user.id})")
            else:
                print(f"Using existing {user.role} user {user.username} ({user.id})")
            return create_access_token(user.id, user.role, user.department, user.name)
    finally:
        await close_db()


def main():
    args = parse_args()
    token = asyncio.run(issue(args))
    print(token)


if __name__ == "__main__":
    main()
