import re
import secrets
import string

ALPHABET = string.ascii_letters + string.digits
SHORT_CODE_LENGTH = 7

_SHORT_CODE_RE = re.compile(r"[A-Za-z0-9]{1,64}")

# Paths served by fixed routes; a short code equal to one of these would be shadowed
RESERVED_CODES = frozenset({"api", "docs", "redoc", "health", "static", "shorten"})


def generate_short_code(length: int = SHORT_CODE_LENGTH) -> str:
    """Generate a cryptographically secure random alphanumeric code."""
    return ''.join(secrets.choice(ALPHABET) for _ in range(length))


def is_valid_short_code(code: str) -> bool:
    """Whether `code` could have been issued at all (case-sensitive)."""
    return _SHORT_CODE_RE.fullmatch(code) is not None


def code_space_size(length: int = SHORT_CODE_LENGTH) -> int:
    return len(ALPHABET) ** length


def is_reserved(code: str) -> bool:
    return code in RESERVED_CODES
