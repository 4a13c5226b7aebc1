"""POST /v1/auth/* - Borrower and staff signup/login"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from lending_gateway.api.dependencies import get_request_id
from lending_gateway.api.v1.errors import handle_domain_errors
from lending_gateway.api.v1.schemas import (
    AdminSignupRequest,
    LoginRequest,
    PrincipalSchema,
    SignupRequest,
    TokenResponse,
)
from lending_gateway.infrastructure.database.session import get_db
from lending_gateway.services.auth_service import ADMIN_ROLE, AuthService

router = APIRouter()


def _borrower_response(user, token: str) -> TokenResponse:
    return TokenResponse(
        token=token,
        user=PrincipalSchema(
            id=str(user.id),
            name=f"{user.first_name} {user.last_name}",
            email=user.email,
            role=user.role,
        ),
    )


def _staff_response(staff, token: str) -> TokenResponse:
    return TokenResponse(
        token=token,
        user=PrincipalSchema(id=str(staff.id), name=staff.full_name, email=staff.email, role=ADMIN_ROLE),
    )


@router.post("/auth/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def signup(body: SignupRequest, request: Request, db: Session = Depends(get_db)):
    """Register a borrower and return a bearer token"""
    with handle_domain_errors(db, get_request_id(request)):
        user, token = AuthService(db).register_user(**body.model_dump())
        db.commit()
        return _borrower_response(user, token)


@router.post("/auth/login", response_model=TokenResponse)
def login(body: LoginRequest, request: Request, db: Session = Depends(get_db)):
    with handle_domain_errors(db, get_request_id(request)):
        user, token = AuthService(db).authenticate_user(body.email, body.password)
        return _borrower_response(user, token)


@router.post("/auth/admin/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def admin_signup(body: AdminSignupRequest, request: Request, db: Session = Depends(get_db)):
    """Register a staff member; employee id must be on the configured allowlist"""
    with handle_domain_errors(db, get_request_id(request)):
        staff, token = AuthService(db).register_staff(**body.model_dump())
        db.commit()
        return _staff_response(staff, token)


@router.post("/auth/admin/login", response_model=TokenResponse)
def admin_login(body: LoginRequest, request: Request, db: Session = Depends(get_db)):
    with handle_domain_errors(db, get_request_id(request)):
        staff, token = AuthService(db).authenticate_staff(body.email, body.password)
        return _staff_response(staff, token)
