# sessionauth/infra/jwt/flask_jwt_envelope_signer.py
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

import jwt as pyjwt
from flask_jwt_extended.exceptions import JWTExtendedException

from sessionauth.services._shared.errors import InternalError, InvalidToken, TokenExpired
from sessionauth.services._shared.ports import AccessClaims, EnvelopeSigner


@dataclass(slots=True)
class FlaskJWTEnvelopeSigner(EnvelopeSigner):
    """
    Adapter for Flask-JWT-Extended.

    Claims are ``{sub, jti, iat, exp, type="access"}``; signing key and
    algorithm come from ``JWT_SECRET_KEY`` / ``JWT_ALGORITHM``.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def mint(self, *, subject_id: str, ttl: timedelta) -> tuple[str, AccessClaims]:
        # NOTE: Flask-JWT-Extended generates a jti by default.
        # We set our own through additional_claims and assert it survived, so the
        # blocklist key is known without decoding the token again.
        from flask_jwt_extended import create_access_token as _create_access

        jti = str(uuid.uuid4())
        try:
            token = cast(
                str,
                _create_access(
                    identity=str(subject_id),
                    additional_claims={"jti": jti},
                    expires_delta=ttl,
                ),
            )
        except (RuntimeError, pyjwt.PyJWTError) as exc:
            raise InternalError("Access token signing failed.") from exc

        claims = self.peek(token)
        if claims.token_id != jti:
            # Fail fast to avoid drift between token and server-side state.
            raise InternalError("Access token jti mismatch after creation.")
        return token, claims

    def verify(self, token: str) -> AccessClaims:
        return self._to_claims(self._decode(token, allow_expired=False))

    def peek(self, token: str) -> AccessClaims:
        return self._to_claims(self._decode(token, allow_expired=True))

    # ------------------------------------------------------------------ #

    @staticmethod
    def _decode(token: str, *, allow_expired: bool) -> dict[str, Any]:
        from flask_jwt_extended import decode_token

        if not token or not isinstance(token, str):
            raise InvalidToken()
        try:
            decoded = cast(dict[str, Any], decode_token(token, allow_expired=allow_expired))
        except pyjwt.ExpiredSignatureError as exc:
            raise TokenExpired() from exc
        except (pyjwt.InvalidTokenError, JWTExtendedException) as exc:
            raise InvalidToken() from exc

        # Flask-JWT-Extended sets "type": "access" | "refresh"
        if decoded.get("type") != "access":
            raise InvalidToken()
        return decoded

    @staticmethod
    def _to_claims(decoded: dict[str, Any]) -> AccessClaims:
        try:
            return AccessClaims(
                subject_id=str(decoded["sub"]),
                token_id=str(decoded["jti"]),
                issued_at=datetime.fromtimestamp(int(decoded["iat"]), tz=UTC),
                expires_at=datetime.fromtimestamp(int(decoded["exp"]), tz=UTC),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidToken() from exc
