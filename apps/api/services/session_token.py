"""Verification of session tokens issued by the external identity provider.

Tokens are HS256 JWTs signed with the shared ``JWT_SECRET``. They must carry
``sub`` and ``exp``; ``iss`` and ``aud`` are enforced when the matching
settings are configured. This service never mints tokens itself.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from config import settings


@dataclass(frozen=True)
class SessionClaims:
    user_id: str
    email: Optional[str]
    expires_at: datetime


def _decode_options() -> Dict[str, Any]:
    return {
        "require_exp": True,
        "require_sub": True,
        "require_iss": bool(settings.JWT_ISSUER),
        "require_aud": bool(settings.JWT_AUDIENCE),
        "verify_aud": bool(settings.JWT_AUDIENCE),
        "leeway": max(int(settings.JWT_LEEWAY_SECONDS), 0),
    }


def verify_session_token(token: str) -> SessionClaims:
    """Validate signature, expiry and identity-provider claims; raise ValueError otherwise."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE or None,
            issuer=settings.JWT_ISSUER or None,
            options=_decode_options(),
        )
    except ExpiredSignatureError as exc:
        raise ValueError("Session token has expired.") from exc
    except JWTError as exc:
        raise ValueError("Invalid session token.") from exc

    subject = str(payload.get("sub") or "").strip()
    if not subject:
        raise ValueError("Session token missing subject.")

    email = str(payload.get("email") or "").strip() or None
    return SessionClaims(
        user_id=subject,
        email=email,
        expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
    )
