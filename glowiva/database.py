# glowiva/database.py

from datetime import datetime, timezone
from typing import Generator

from fastapi import Request
from sqlalchemy import CheckConstraint, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def utc_now() -> datetime:
    # Microsecond precision, so commission cutoffs compare exactly
    return datetime.now(timezone.utc)


def enum_check(column: str, values, name: str) -> CheckConstraint:
    quoted = ", ".join(f"'{v}'" for v in values)
    return CheckConstraint(f"{column} IN ({quoted})", name=name)


def build_engine(database_url: str) -> Engine:
    connect_args = {}
    kwargs = {}

    # only sqlite needs check_same_thread
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}

        # in-memory databases must share one connection
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool

    return create_engine(database_url, connect_args=connect_args, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
