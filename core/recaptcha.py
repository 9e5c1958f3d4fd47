import logging

import requests
from django.conf import settings

from .errors import InvalidInputError, UpstreamUnavailableError


logger = logging.getLogger(__name__)


def verify_recaptcha(token: str, remote_ip: str | None = None) -> None:
    """Check a reCAPTCHA token with Google; no-op while no secret is configured."""
    secret = getattr(settings, "RECAPTCHA_SECRET_KEY", "")
    if not secret:
        return

    if not token:
        raise InvalidInputError("Token reCAPTCHA manquant", field="recaptchaToken")

    payload = {"secret": secret, "response": token}
    if remote_ip:
        payload["remoteip"] = remote_ip

    try:
        resp = requests.post(
            settings.RECAPTCHA_VERIFY_URL,
            data=payload,
            timeout=getattr(settings, "RECAPTCHA_TIMEOUT", 5),
        )
        data = resp.json()
    except (requests.RequestException, ValueError):
        logger.warning("reCAPTCHA verification request failed")
        raise UpstreamUnavailableError()

    if not data.get("success"):
        logger.info("reCAPTCHA rejected: %s", data.get("error-codes") or ["unknown"])
        raise InvalidInputError("Échec de la vérification reCAPTCHA", field="recaptchaToken")
