# services/auth.py
import logging
from typing import Optional

import requests
from fastapi import Header, HTTPException, Request

from models import GoogleUser

logger = logging.getLogger(__name__)

TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"


class InvalidTokenError(Exception):
    pass


def extract_bearer_token(authorization: str) -> Optional[str]:
    parts = authorization.strip().split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def verify_google_token(
    token: str,
    client_id: Optional[str] = None,
    timeout: Optional[float] = None,
) -> GoogleUser:
    """
    Validates a Google access token against the tokeninfo endpoint.

    Makes exactly one request. Any failure (transport error, non-2xx,
    missing claims, audience mismatch) raises InvalidTokenError.
    """
    try:
        res = requests.get(
            TOKENINFO_URL,
            params={"access_token": token},
            timeout=timeout,
        )
    except requests.RequestException as e:
        # The message of e carries the URL, and with it the token.
        raise InvalidTokenError(f"Token info request failed ({type(e).__name__})") from e

    if not res.ok:
        raise InvalidTokenError(f"Invalid token (status {res.status_code})")

    try:
        info = res.json()
    except ValueError as e:
        raise InvalidTokenError("Token info response is not JSON") from e

    email = info.get("email")
    if not email:
        raise InvalidTokenError("Token does not contain email")

    sub = info.get("sub")
    if not sub:
        raise InvalidTokenError("Token does not contain subject")

    if client_id and client_id not in (info.get("aud"), info.get("azp")):
        raise InvalidTokenError("Token was issued for another client")

    return GoogleUser(user_id=sub, email=email)


def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> GoogleUser:
    if not authorization:
        raise HTTPException(status_code=401, detail="No authorization header")

    token = extract_bearer_token(authorization)
    if not token:
        logger.warning("Token verification error: malformed authorization header")
        raise HTTPException(status_code=401, detail="Invalid token")

    settings = request.app.state.settings
    try:
        return verify_google_token(
            token,
            client_id=settings.google_client_id,
            timeout=settings.http_timeout,
        )
    except InvalidTokenError as e:
        logger.warning("Token verification error: %s", e)
        raise HTTPException(status_code=401, detail="Invalid token")
