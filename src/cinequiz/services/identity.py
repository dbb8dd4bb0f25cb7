"""Identity keys and input validation shared by the services."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Literal

from email_validator import EmailNotValidError, validate_email

from cinequiz.core.errors import InvalidAddress, InvalidEmail

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
WALLET_ADDRESS_MIN_LENGTH = 32
WALLET_ADDRESS_MAX_LENGTH = 44

_WALLET_RE = re.compile(
    rf"^[{BASE58_ALPHABET}]{{{WALLET_ADDRESS_MIN_LENGTH},{WALLET_ADDRESS_MAX_LENGTH}}}$"
)
_WHITESPACE_RE = re.compile(r"\s+")

IdentityKind = Literal["wallet", "ip"]


@dataclass(frozen=True)
class Identity:
    """Key used for rate limiting and participation checks."""

    kind: IdentityKind
    value: str

    @property
    def key(self) -> str:
        """Return a storage key unique across identity kinds."""
        return f"{self.kind}:{self.value}"


def is_valid_wallet_address(address: str) -> bool:
    """Return True for a base58 string of 32 to 44 characters."""
    return bool(_WALLET_RE.fullmatch(address))


def validate_wallet_address(address: str | None) -> str:
    """Return the stripped wallet address or raise ``InvalidAddress``."""
    candidate = (address or "").strip()
    if not is_valid_wallet_address(candidate):
        raise InvalidAddress()
    return candidate


def validate_email_address(email: str | None) -> str:
    """Return the normalized email address or raise ``InvalidEmail``.

    Deliverability (DNS) is not checked; the verification email is the
    ownership proof.
    """
    try:
        result = validate_email((email or "").strip(), check_deliverability=False)
    except EmailNotValidError as err:
        raise InvalidEmail(str(err)) from err
    return result.normalized


def resolve_identity(wallet_address: str | None, client_ip: str | None) -> Identity:
    """Pick the strongest identity available for the caller.

    A wallet address is preferred so that rotating IP addresses does not reset
    the caller's budget. The address is validated when supplied.
    """
    if wallet_address:
        return Identity("wallet", validate_wallet_address(wallet_address))
    return Identity("ip", client_ip or "unknown")


def normalize_title(text: str) -> str:
    """Normalize a guess or title for comparison.

    Case, surrounding whitespace, repeated inner whitespace and Unicode
    compatibility forms are ignored.
    """
    folded = unicodedata.normalize("NFKC", text).casefold()
    return _WHITESPACE_RE.sub(" ", folded).strip()


def titles_match(guess: str, title: str) -> bool:
    """Return True when ``guess`` names ``title``."""
    normalized = normalize_title(guess)
    return bool(normalized) and normalized == normalize_title(title)
