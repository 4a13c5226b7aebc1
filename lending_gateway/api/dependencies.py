"""Dependency injection for FastAPI endpoints"""

from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from lending_gateway.domain.exceptions import AuthenticationError
from lending_gateway.infrastructure.database.session import get_db
from lending_gateway.infrastructure.security import decode_token
from lending_gateway.services.auth_service import ADMIN_ROLE, BORROWER_ROLES
from lending_gateway.services.loan_service import LoanService

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class Principal:
    """Authenticated caller taken from the bearer token"""

    id: str
    role: str


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided. Authorization denied.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_token(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Principal(id=payload["sub"], role=payload["role"])


def require_borrower(principal: Principal = Depends(get_current_principal)) -> Principal:
    if principal.role not in BORROWER_ROLES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied. Users only.")
    return principal


def require_staff(principal: Principal = Depends(get_current_principal)) -> Principal:
    if principal.role != ADMIN_ROLE:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied. Admins only.")
    return principal


def get_loan_service(db: Session = Depends(get_db)) -> LoanService:
    """Provide a LoanService bound to the request session"""
    return LoanService(db)
