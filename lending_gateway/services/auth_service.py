"""Borrower and staff registration and login"""

import logging
from typing import Optional, Tuple
from sqlalchemy.orm import Session
from lending_gateway.config import settings
from lending_gateway.domain.exceptions import AuthenticationError, ConflictError, ValidationError
from lending_gateway.domain.models import PROFILE_EMPLOYMENT_STATUSES
from lending_gateway.infrastructure.database.models import Staff, User
from lending_gateway.infrastructure.database.repositories import StaffRepository, UserRepository
from lending_gateway.infrastructure.security import (
    create_access_token,
    get_password_hash,
    is_valid_phone,
    validate_password_strength,
    verify_password,
)

logger = logging.getLogger(__name__)

BORROWER_ROLES = ("user", "premium")
ADMIN_ROLE = "admin"
MAX_ANNUAL_INCOME = 10_000_000


class AuthService:
    def __init__(self, db: Session):
        self.users = UserRepository(db)
        self.staff = StaffRepository(db)

    def register_user(
        self,
        first_name: str,
        last_name: str,
        email: str,
        phone: str,
        password: str,
        employment_status: str,
        annual_income: float,
        role: Optional[str] = None,
    ) -> Tuple[User, str]:
        """
        Create a borrower account and issue a token.

        Raises:
            ValidationError: Weak password, bad phone, unknown role or employment status
            ConflictError: E-mail or phone already registered
        """
        ok, message = validate_password_strength(password)
        if not ok:
            raise ValidationError(message)
        if not is_valid_phone(phone):
            raise ValidationError("Lesotho phone must be +266 followed by 8 digits")
        if employment_status not in PROFILE_EMPLOYMENT_STATUSES:
            raise ValidationError(f"Invalid employment status '{employment_status}'")
        if not 0 <= annual_income <= MAX_ANNUAL_INCOME:
            raise ValidationError(f"Annual income must be between 0 and {MAX_ANNUAL_INCOME:,}")
        role = role or "user"
        if role not in BORROWER_ROLES:
            raise ValidationError(f"Invalid role '{role}'")

        if self.users.exists_with_email_or_phone(email, phone):
            raise ConflictError("User with this email or phone already exists")

        user = self.users.create_user(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email.strip().lower(),
            phone=phone,
            password_hash=get_password_hash(password),
            role=role,
            employment_status=employment_status,
            annual_income=annual_income,
        )
        logger.info("Borrower registered", extra={"user_id": str(user.id), "role": role})
        return user, create_access_token(str(user.id), user.role)

    def authenticate_user(self, email: str, password: str) -> Tuple[User, str]:
        user = self.users.get_by_email(email.strip())
        if user is None or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")
        return user, create_access_token(str(user.id), user.role)

    def register_staff(self, full_name: str, email: str, password: str, employee_id: str) -> Tuple[Staff, str]:
        """
        Create a staff account. Only employee ids on the configured allowlist may register.

        Raises:
            AuthenticationError: Employee id not on the allowlist
            ConflictError: E-mail or employee id already registered
        """
        if employee_id not in settings.staff_employee_ids:
            raise AuthenticationError("Invalid employee ID")
        if self.staff.exists(email, employee_id):
            raise ConflictError("Admin already exists")

        staff = self.staff.create_staff(
            full_name=full_name.strip(),
            email=email.strip().lower(),
            password_hash=get_password_hash(password),
            employee_id=employee_id,
        )
        logger.info("Staff registered", extra={"staff_id": str(staff.id), "employee_id": employee_id})
        return staff, create_access_token(str(staff.id), ADMIN_ROLE)

    def authenticate_staff(self, email: str, password: str) -> Tuple[Staff, str]:
        staff = self.staff.get_by_email(email.strip())
        if staff is None or not verify_password(password, staff.password_hash):
            raise AuthenticationError("Invalid credentials")
        return staff, create_access_token(str(staff.id), ADMIN_ROLE)
