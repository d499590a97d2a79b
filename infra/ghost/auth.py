"""
Ghost Admin API authentication.

Admin keys look like `<id>:<hex secret>`. Requests carry a short-lived
HS256 JWT whose header names the key id (`kid`) and whose audience is
`/admin/`. Tokens live five minutes; the signer hands out a fresh one
shortly before the current one expires.
"""

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from typing import Callable, Optional

from infra.errors import SigningError


TOKEN_LIFETIME_SECONDS = 300
REFRESH_MARGIN_SECONDS = 30
AUDIENCE = "/admin/"


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode().rstrip('=')


def _b64url_json(obj: dict) -> str:
    return _b64url(json.dumps(obj, separators=(',', ':')).encode())


@dataclass(frozen=True)
class GhostAdminKey:
    key_id: str
    secret: bytes

    @classmethod
    def parse(cls, admin_api_key: str) -> "GhostAdminKey":
        if not admin_api_key or ':' not in admin_api_key:
            raise SigningError("Ghost API key must be in format 'id:secret'")

        key_id, _, secret_hex = admin_api_key.partition(':')
        if not key_id or not secret_hex:
            raise SigningError("Ghost API key must be in format 'id:secret'")

        try:
            secret = bytes.fromhex(secret_hex)
        except ValueError as e:
            raise SigningError("Ghost API key secret is not valid hex") from e

        return cls(key_id=key_id, secret=secret)


class GhostTokenSigner:
    def __init__(
        self,
        admin_key: GhostAdminKey,
        clock: Callable[[], float] = time.time,
        lifetime: int = TOKEN_LIFETIME_SECONDS
    ):
        self.admin_key = admin_key
        self.clock = clock
        self.lifetime = lifetime
        self._token: Optional[str] = None
        self._expires_at = 0

    @classmethod
    def from_key_string(cls, admin_api_key: str, **kwargs) -> "GhostTokenSigner":
        return cls(GhostAdminKey.parse(admin_api_key), **kwargs)

    def sign(self) -> str:
        now = int(self.clock())
        header = {"alg": "HS256", "typ": "JWT", "kid": self.admin_key.key_id}
        payload = {"iat": now, "exp": now + self.lifetime, "aud": AUDIENCE}

        signing_input = f"{_b64url_json(header)}.{_b64url_json(payload)}"
        try:
            signature = hmac.new(self.admin_key.secret, signing_input.encode(), hashlib.sha256).digest()
        except (TypeError, ValueError) as e:
            raise SigningError(f"Failed to sign Ghost token: {e}") from e

        self._token = f"{signing_input}.{_b64url(signature)}"
        self._expires_at = now + self.lifetime
        return self._token

    def token(self) -> str:
        """Current token, re-signed when it is about to expire."""
        if self._token is None or self.clock() >= self._expires_at - REFRESH_MARGIN_SECONDS:
            return self.sign()
        return self._token

    def authorization_header(self) -> dict:
        return {"Authorization": f"Ghost {self.token()}"}
