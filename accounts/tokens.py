"""Bearer access tokens (JWT) carrying the member id."""

import logging
from datetime import datetime, timedelta, timezone

import jwt
from django.conf import settings
from django.contrib.auth import get_user_model

from core.errors import AuthenticationError


logger = logging.getLogger(__name__)


def create_access_token(user, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRES_MINUTES)
    )
    payload = {
        "sub": str(user.pk),
        "email": user.email,
        "member_type": user.member_type,
        "exp": expire,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expiré", expired_or_invalid=True)
    except jwt.PyJWTError:
        raise AuthenticationError("Token invalide", expired_or_invalid=True)


def bearer_token(request) -> str:
    header = (request.META.get("HTTP_AUTHORIZATION") or "").strip()
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def user_from_request(request):
    """Resolve the caller from ``Authorization: Bearer <token>``.

    Raises AuthenticationError (401 when absent, 403 when rejected) before
    any store mutation can happen.
    """
    token = bearer_token(request)
    if not token:
        raise AuthenticationError("Token manquant")

    payload = decode_access_token(token)
    user_id = str(payload.get("sub") or "")
    if not user_id.isdigit():
        raise AuthenticationError("Token invalide", expired_or_invalid=True)

    user = get_user_model()._default_manager.filter(pk=int(user_id), is_active=True).first()
    if user is None:
        logger.info("Token for unknown or inactive member %s", user_id)
        raise AuthenticationError("Token invalide", expired_or_invalid=True)
    return user
