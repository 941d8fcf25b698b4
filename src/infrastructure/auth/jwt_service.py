from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from src.application.errors import AuthError
from src.domain.value_objects.principal import Principal


class JWTService:
    """Issues and verifies the bearer tokens field clients sync with.

    A token carries everything needed to build the request principal: the user
    (`sub`), the role and, for tenant-bound users, the `tenant_id`.
    """

    def __init__(
        self,
        *,
        secret_key: str,
        algorithm: str,
        access_token_expires_minutes: int,
        issuer: str | None = None,
        audience: str | None = None,
    ) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expires_minutes = access_token_expires_minutes
        self.issuer = issuer
        self.audience = audience

    def create_access_token(
        self,
        principal: Principal,
        *,
        extra_claims: Mapping[str, Any] | None = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        expires_at = now + timedelta(minutes=self.access_token_expires_minutes)
        to_encode: dict[str, Any] = {
            "sub": str(principal.user_id),
            "role": principal.role.value,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            "typ": "access",
        }
        if principal.tenant_id is not None:
            to_encode["tenant_id"] = str(principal.tenant_id)
        if self.issuer:
            to_encode["iss"] = self.issuer
        if self.audience:
            to_encode["aud"] = self.audience
        if extra_claims:
            to_encode.update(extra_claims)
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
            )
        except ExpiredSignatureError as exc:
            raise AuthError("Token expired") from exc
        except JWTError as exc:
            raise AuthError("Token validation failed") from exc
        if claims.get("typ", "access") != "access":
            raise AuthError("Access token required")
        return claims
