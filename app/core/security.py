from jose import JWTError, jwt
from app.config import settings
from app.core.exceptions import UnauthorizedException


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token using shared SECRET_KEY.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub' (user_id), 'exp', etc.

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")

    # jose checks expiry only when the claim is present
    if payload.get("exp") is None:
        raise UnauthorizedException("Token missing expiration")

    if payload.get("sub") is None:
        raise UnauthorizedException("Token missing user identifier")

    return payload


def extract_identity(token: str) -> tuple[str, str | None]:
    """
    Extract auth_user_id and display name from JWT token.

    The display name comes from the 'name' claim, or from
    'given_name'/'family_name' when only those are present.
    """
    payload = decode_jwt(token)
    name = payload.get("name")
    if not name:
        parts = [payload.get("given_name"), payload.get("family_name")]
        name = " ".join(part for part in parts if part) or None
    return payload["sub"], name
