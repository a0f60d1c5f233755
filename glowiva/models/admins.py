# glowiva/models/admins.py

from sqlalchemy import Column, DateTime, Integer, String

from glowiva.database import Base, enum_check, utc_now


ADMIN_ROLES = ("admin", "super_admin")


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)

    role = Column(String(20), nullable=False, default="admin")

    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        enum_check("role", ADMIN_ROLES, "ck_admin_role_valid"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
