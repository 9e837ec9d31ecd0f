"""Password hashing utilities using bcrypt."""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import bcrypt

_executor = ThreadPoolExecutor(max_workers=4)

BCRYPT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72

DUMMY_HASH = bcrypt.hashpw(b"dummy", bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode()


def _encode(password: str) -> bytes:
    return password.encode()[:MAX_PASSWORD_BYTES]


async def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        _executor,
        lambda: bcrypt.hashpw(
            _encode(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        ).decode(),
    )


async def verify_password(plain: str, hashed: str | None) -> bool:
    """Verify a password against a bcrypt hash.

    A missing hash (federated-only account) never verifies, but still costs
    one bcrypt round against ``DUMMY_HASH``.
    """
    target = hashed or DUMMY_HASH
    loop = asyncio.get_running_loop()
    matched = await loop.run_in_executor(
        _executor,
        lambda: bcrypt.checkpw(_encode(plain), target.encode()),
    )
    return matched and hashed is not None
