import logging

from starlette.requests import Request

from imgdrop.errors import Unauthorized
from imgdrop.totp import TotpVerifier

logger = logging.getLogger(__name__)


def get_verifier(request: Request) -> TotpVerifier:
    return request.app.state.verifier


def require_totp(token, verifier: TotpVerifier, client: str = "unknown") -> None:
    if not isinstance(token, str) or not token:
        logger.warning("upload rejected: missing TOTP token from %s", client)
        raise Unauthorized()
    if not verifier.validate(token):
        logger.warning("upload rejected: invalid TOTP token from %s", client)
        raise Unauthorized()
