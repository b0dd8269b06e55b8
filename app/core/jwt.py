# app/core/jwt.py
#
# Access tokens are minted by the accounts service with the shared
# SECRET_KEY; this API only checks them.

from jose import jwt, JWTError
from app.core.config import settings


def decode_access_token(token: str):
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )

        # Refresh and reset tokens are not accepted here
        if payload.get("type") != "access":
            return None

        return payload

    except JWTError:
        return None
