"""Password hashing and JWT issuance"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from lending_gateway.config import settings
from lending_gateway.domain.exceptions import AuthenticationError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

PHONE_PATTERN = re.compile(r"^\+266\d{8}$")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


def create_access_token(subject: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a bearer token carrying principal id and role"""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {"sub": subject, "role": role, "exp": expire}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a bearer token.

    Raises:
        AuthenticationError: Bad signature, expired, or missing claims
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthenticationError("Invalid or expired token") from e

    if not payload.get("sub") or not payload.get("role"):
        raise AuthenticationError("Token is missing required claims")
    return payload


def validate_password_strength(password: str) -> tuple[bool, str]:
    """
    Validate password strength
    Returns: (is_valid, error_message)
    """
    if len(password) < 8:
        return False, "Password must be at least 8 characters long"

    if not any(char.isupper() for char in password):
        return False, "Password must contain at least one uppercase letter"

    if not any(char.islower() for char in password):
        return False, "Password must contain at least one lowercase letter"

    if not any(char.isdigit() for char in password):
        return False, "Password must contain at least one digit"

    if all(char.isalnum() for char in password):
        return False, "Password must contain at least one special character"

    return True, ""


def is_valid_phone(phone: str) -> bool:
    """Lesotho mobile format: +266 followed by 8 digits"""
    return bool(PHONE_PATTERN.match(phone or ""))
