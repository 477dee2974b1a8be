"""Salted password hashing with bcrypt.

bcrypt is CPU-bound by design; the async wrappers push the work onto the
threadpool so request dispatch is never blocked.
"""

from functools import lru_cache

import bcrypt
from fastapi.concurrency import run_in_threadpool

from chatauth.auth.exceptions import PasswordPolicyError

# bcrypt ignores (or rejects) input past this length.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int) -> str:
    """Hash a password with a fresh salt at the given work factor."""
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise PasswordPolicyError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes long"
        )
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check of a password against a bcrypt hash.

    Over-length passwords and malformed hashes compare as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


@lru_cache
def dummy_hash(rounds: int) -> str:
    """A throwaway hash checked when an account has no password, so both
    paths cost the same."""
    return hash_password("chatauth-dummy-password", rounds)


async def hash_password_async(password: str, rounds: int) -> str:
    return await run_in_threadpool(hash_password, password, rounds)


async def verify_password_async(password: str, password_hash: str) -> bool:
    return await run_in_threadpool(verify_password, password, password_hash)


def verify_against_dummy(password: str, rounds: int) -> bool:
    """Spend one verification's worth of bcrypt work on a known-bad hash."""
    return verify_password(password, dummy_hash(rounds))


async def verify_against_dummy_async(password: str, rounds: int) -> bool:
    # The first call per cost also builds the dummy hash, so both steps
    # run on the worker thread.
    return await run_in_threadpool(verify_against_dummy, password, rounds)
