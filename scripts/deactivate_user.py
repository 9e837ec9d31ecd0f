"""Deactivate or reactivate a user account.

Inactive accounts are refused at login and Google sign-in.

Usage:
    python -m scripts.deactivate_user --email someone@amzur.com
    python -m scripts.deactivate_user --email someone@amzur.com --activate
"""

import argparse
import asyncio

from gemini_chat.core.database import async_session_factory, engine
from gemini_chat.repositories.user_repo import UserRepository


async def set_active(email: str, active: bool) -> bool:
    """Flip ``is_active`` for the account. Returns False if it does not exist."""
    try:
        async with async_session_factory() as session:
            user = await UserRepository(session).find_by_email(email)
            if user is None:
                print(f"No user with email '{email}'.")
                return False
            user.is_active = active
            await session.commit()
            state = "activated" if active else "deactivated"
            print(f"User {user.email} (id={user.id}) {state}.")
    finally:
        await engine.dispose()
    return True


def main() -> None:
    parser = argparse.ArgumentParser(description="Deactivate a user account")
    parser.add_argument("--email", required=True, help="Account email")
    parser.add_argument(
        "--activate",
        action="store_true",
        help="Reactivate instead of deactivating",
    )
    args = parser.parse_args()

    if not asyncio.run(set_active(args.email, args.activate)):
        raise SystemExit(1)


if __name__ == "__main__":
    main()
