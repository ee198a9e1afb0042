import base64
import secrets

from urlshort.core.exceptions import RandomSourceError

# base64url alphabet
ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
TOKEN_LENGTH = 8


class TokenGenerator:
    """Random URL-safe tokens. Uniqueness is the caller's problem."""

    def __init__(self, length: int = TOKEN_LENGTH, randbytes=secrets.token_bytes):
        self.length = length
        self._randbytes = randbytes

    def generate(self) -> str:
        try:
            raw = self._randbytes(self.length)
        except (OSError, NotImplementedError) as e:
            raise RandomSourceError(f"Entropy source unavailable: {e}") from e
        # n bytes encode to at least n base64 characters
        return base64.urlsafe_b64encode(raw).decode("ascii")[:self.length]
