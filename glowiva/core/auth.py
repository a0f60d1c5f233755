# glowiva/core/auth.py

from dataclasses import dataclass

from fastapi import Depends
from sqlalchemy.orm import Session

from glowiva.database import get_db
from glowiva.models.admins import ADMIN_ROLES, Admin
from glowiva.models.employees import Employee
from glowiva.core.config import Settings, get_settings
from glowiva.core.errors import AuthenticationError, AuthorizationError
from glowiva.core.jwt import decode_access_token
from glowiva.core.oauth2 import oauth2_scheme

EMPLOYEE_ROLE = "employee"


@dataclass
class Principal:
    """The authenticated caller: an Admin or an Employee record plus its role."""
    user: Admin | Employee
    role: str

    @property
    def id(self) -> int:
        return self.user.id

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def is_employee(self) -> bool:
        return self.role == EMPLOYEE_ROLE


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Principal:
    if not token:
        raise AuthenticationError("No token provided, authorization denied")

    payload = decode_access_token(token, settings)

    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    user_id = payload.get("sub")
    role = payload.get("role")

    if user_id is None or not str(user_id).isdigit() or role not in (*ADMIN_ROLES, EMPLOYEE_ROLE):
        raise AuthenticationError("Invalid token payload")

    if role in ADMIN_ROLES:
        user = db.get(Admin, int(user_id))
        if user is not None:
            # the stored role wins over the claim
            role = user.role
    else:
        user = db.get(Employee, int(user_id))

    if user is None:
        raise AuthenticationError("Token is not valid")

    if isinstance(user, Employee) and not user.is_active:
        raise AuthenticationError("Account is deactivated")

    return Principal(user=user, role=role)


def get_optional_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Principal | None:
    if not token:
        return None
    return get_current_user(token=token, db=db, settings=settings)


def get_admin_user(
    current_user: Principal = Depends(get_current_user),
) -> Principal:
    # Ensure the user has admin privileges
    if not current_user.is_admin:
        raise AuthorizationError("Admin access required")
    return current_user


def get_employee_user(
    current_user: Principal = Depends(get_current_user),
) -> Principal:
    if not current_user.is_employee:
        raise AuthorizationError("Employee access required")
    return current_user


def ensure_self_or_admin(current_user: Principal, employee_id: int) -> None:
    if current_user.is_admin:
        return
    if current_user.id != employee_id:
        raise AuthorizationError("You can only view your own records")


def ensure_order_author(current_user: Principal, order, action: str = "edit") -> None:
    # Admins may touch any order; employees only the ones they created
    if current_user.is_admin:
        return
    if order.created_by_id != current_user.id:
        raise AuthorizationError(f"You can only {action} orders you created")
