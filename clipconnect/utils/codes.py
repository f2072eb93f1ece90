"""Pairing code and key material generation."""

import base64
import secrets

from clipconnect.config import UNAMBIGUOUS_ALPHABET


def generate_code(length: int = 6, alphabet: str = UNAMBIGUOUS_ALPHABET) -> str:
    """Generate a random upper-case pairing code."""
    return "".join(secrets.choice(alphabet) for _ in range(length)).upper()


def generate_key_material(num_bytes: int = 32) -> str:
    """Generate a random symmetric key, base64-encoded for transport."""
    return base64.b64encode(secrets.token_bytes(num_bytes)).decode("ascii")
