import datetime

import jwt
from flask import current_app

ALGORITHM = "HS256"
TOKEN_LIFETIME = datetime.timedelta(days=7)


def _signing_secret():
    return current_app.config.get("JWT_SECRET") or current_app.config["SECRET_KEY"]


def generate_token(user, now=None):
    """
    Issues a signed bearer token for the given user.
    The token carries {user_id, email} and expires 7 days after issuance.
    """
    issued_at = now or datetime.datetime.now(datetime.timezone.utc)
    payload = {
        "user_id": user.id,
        "email": user.email,
        "iat": issued_at,
        "exp": issued_at + TOKEN_LIFETIME,
    }
    token = jwt.encode(payload, _signing_secret(), algorithm=ALGORITHM)

    # PyJWT < 2.0 returns bytes
    if isinstance(token, bytes):
        token = token.decode("utf-8")
    return token


def verify_token(token):
    """Returns the decoded payload. Raises jwt.InvalidTokenError on any failure."""
    payload = jwt.decode(
        token,
        _signing_secret(),
        algorithms=[ALGORITHM],
        options={"require": ["exp", "user_id"]},
    )
    return payload
