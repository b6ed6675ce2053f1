"""Join code alphabet, generation and format validation.

Codes are short human-typeable tokens. The alphabet leaves out characters
that are easily confused when read aloud or copied by hand (0/O, 1/I/L).
"""
import secrets
from typing import Any, Optional

CODE_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 6

_ALPHABET_SET = frozenset(CODE_ALPHABET)


def generate_code(length: int = CODE_LENGTH) -> str:
    """Return ``length`` characters drawn uniformly from the code alphabet."""
    if length < 1:
        raise ValueError("Join code length must be at least 1")
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def is_valid_format(candidate: Any) -> bool:
    """True iff ``candidate`` is a 6-character string over the code alphabet.

    Never raises: None, non-strings and empty strings are simply invalid.
    """
    if not candidate or not isinstance(candidate, str):
        return False
    if len(candidate) != CODE_LENGTH:
        return False
    return all(ch in _ALPHABET_SET for ch in candidate)


def normalize_code(candidate: Any) -> Optional[str]:
    """Strip whitespace and upper-case a participant-typed code."""
    if not isinstance(candidate, str):
        return None
    return candidate.strip().upper()
