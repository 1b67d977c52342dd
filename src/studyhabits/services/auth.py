"""Name + PIN identity resolution."""
# Shared-secret check for low-stakes classroom use; there are no sessions or tokens.

from __future__ import annotations

from dataclasses import dataclass

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from ..errors import InvalidCredential, InvalidInput
from ..infra.repositories.roster import RosterRepository
from ..infra.repositories.users import UserRepository
from ..logging_config import get_logger
from ..models.user import UserProfile

logger = get_logger(__name__)

_hasher = PasswordHasher()


@dataclass(frozen=True)
class IdentityResult:
    """The profile a name resolved to, and whether it was just created."""

    profile: UserProfile
    created: bool


def hash_secret(secret: str) -> str:
    """Return a one-way digest of the PIN."""
    return _hasher.hash(secret)


def verify_secret(credential_hash: str, secret: str) -> bool:
    """Compare a PIN against a stored digest without ever decoding it."""
    if not credential_hash:
        return False
    try:
        return _hasher.verify(credential_hash, secret)
    except (VerifyMismatchError, InvalidHash, VerificationError):
        return False


def normalize_name(name: str | None) -> str:
    return (name or "").strip()


def resolve_identity(
    *,
    name: str,
    secret: str,
    users: UserRepository,
    roster: RosterRepository,
) -> IdentityResult:
    """Verify an existing user or create a new one with default state.

    Raises:
        InvalidInput: name or secret is empty.
        InvalidCredential: the name exists and the secret does not match.
        StoreUnavailable: the document store failed.
    """

    name = normalize_name(name)
    if not name or not secret:
        raise InvalidInput("Enter name and code")

    existing = users.get(name)
    if existing is not None:
        if not verify_secret(existing.credential_hash, secret):
            logger.warning("Credential mismatch", extra={"user": name})
            raise InvalidCredential("Wrong code for this name")
        logger.info("User verified", extra={"user": name})
        return IdentityResult(profile=existing, created=False)

    profile = users.create(UserProfile(name=name, credential_hash=hash_secret(secret)))
    added = roster.add(name)
    logger.info("User created", extra={"user": name, "roster_added": added})
    return IdentityResult(profile=profile, created=True)


__all__ = ["IdentityResult", "hash_secret", "normalize_name", "resolve_identity", "verify_secret"]
