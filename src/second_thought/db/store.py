"""Store protocols consumed by the services, and their SQLModel implementations.

Implementations are synchronous; services call them through asyncio.to_thread.
Any SQLAlchemy failure surfaces as StoreError naming the operation.
"""
import logging
from collections.abc import Generator
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Protocol

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from second_thought.db.models import CoolDownRow, InterventionRow, UserProfileRow
from second_thought.db.sessions import get_session
from second_thought.providers.core.exceptions import StoreError
from second_thought.schemas import (CoolDown, CoolDownStatus, ProductRecord,
                                    Recommendation, UserProfile)
from second_thought.utils import as_utc, utcnow

logger = logging.getLogger(__name__)


class CoolDownStore(Protocol):
    """Persistence for cool-down records."""

    def insert(
        self,
        *,
        user_id: str,
        product: ProductRecord,
        recommendation: Recommendation,
        started_at: datetime,
        expires_at: datetime,
    ) -> CoolDown: ...

    def get(self, cooldown_id: str) -> CoolDown | None: ...

    def find_active(self, user_id: str, product_url: str) -> CoolDown | None: ...

    def list_by_status(
        self,
        user_id: str,
        status: CoolDownStatus,
        *,
        newest_first: bool = False,
        limit: int | None = None,
    ) -> list[CoolDown]: ...

    def update_status(self, cooldown_id: str, status: CoolDownStatus) -> bool: ...

    def expire_stale(self, now: datetime) -> int: ...


class UserProfileStore(Protocol):
    """Persistence for user profiles."""

    def get(self, user_id: str) -> UserProfile | None: ...

    def insert(self, user_id: str, fields: dict[str, Any]) -> UserProfile: ...

    def update(self, user_id: str, fields: dict[str, Any]) -> UserProfile | None: ...


class InterventionStore(Protocol):
    """Append-only log of user actions on recommendations."""

    def record(
        self,
        user_id: str,
        product: ProductRecord,
        recommendation: Recommendation,
        user_action: str,
    ) -> str: ...


def snapshot(model: ProductRecord | Recommendation) -> dict[str, Any]:
    """Independent JSON copy of a product or recommendation."""
    return model.model_dump(mode="json", by_alias=True)


def row_to_cooldown(row: CoolDownRow) -> CoolDown:
    return CoolDown(
        id=row.id,
        user_id=row.user_id,
        product_url=row.product_url,
        product_info=ProductRecord.model_validate(row.product_info),
        analysis_result=Recommendation.model_validate(row.analysis_result),
        started_at=as_utc(row.started_at),
        expires_at=as_utc(row.expires_at),
        status=CoolDownStatus(row.status),
    )


def row_to_profile(row: UserProfileRow) -> UserProfile:
    return UserProfile(
        id=row.id,
        savings_goal=row.savings_goal,
        monthly_budget=row.monthly_budget,
        financial_goals=list(row.financial_goals or []),
        spending_threshold=row.spending_threshold,
        cooldown_enabled=row.cooldown_enabled,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


class _SqlStore:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @contextmanager
    def _session(self, operation: str) -> Generator[Session, None, None]:
        try:
            with get_session(self._engine) as session:
                yield session
        except SQLAlchemyError as exc:
            raise StoreError(operation, exc) from exc


class SqlCoolDownStore(_SqlStore):
    """CoolDownStore backed by the cooldowns table."""

    def insert(
        self,
        *,
        user_id: str,
        product: ProductRecord,
        recommendation: Recommendation,
        started_at: datetime,
        expires_at: datetime,
    ) -> CoolDown:
        row = CoolDownRow(
            user_id=user_id,
            product_url=product.url,
            product_info=snapshot(product),
            analysis_result=snapshot(recommendation),
            started_at=started_at,
            expires_at=expires_at,
            status=CoolDownStatus.ACTIVE.value,
        )
        with self._session("start cool-down") as session:
            session.add(row)
            session.flush()
            session.refresh(row)
            return row_to_cooldown(row)

    def get(self, cooldown_id: str) -> CoolDown | None:
        with self._session("get cool-down") as session:
            row = session.get(CoolDownRow, cooldown_id)
            return row_to_cooldown(row) if row else None

    def find_active(self, user_id: str, product_url: str) -> CoolDown | None:
        statement = (
            select(CoolDownRow)
            .where(CoolDownRow.user_id == user_id)
            .where(CoolDownRow.product_url == product_url)
            .where(CoolDownRow.status == CoolDownStatus.ACTIVE.value)
            .order_by(CoolDownRow.started_at.desc())
        )
        with self._session("check cool-down") as session:
            rows = session.exec(statement).all()
            if len(rows) > 1:
                logger.warning(
                    "%d active cool-downs for user %s and %s; using the newest",
                    len(rows),
                    user_id,
                    product_url,
                )
            return row_to_cooldown(rows[0]) if rows else None

    def list_by_status(
        self,
        user_id: str,
        status: CoolDownStatus,
        *,
        newest_first: bool = False,
        limit: int | None = None,
    ) -> list[CoolDown]:
        order = CoolDownRow.expires_at.desc() if newest_first else CoolDownRow.expires_at.asc()
        statement = (
            select(CoolDownRow)
            .where(CoolDownRow.user_id == user_id)
            .where(CoolDownRow.status == status.value)
            .order_by(order)
        )
        if limit is not None:
            statement = statement.limit(limit)
        with self._session(f"get {status.value} cool-downs") as session:
            return [row_to_cooldown(row) for row in session.exec(statement).all()]

    def update_status(self, cooldown_id: str, status: CoolDownStatus) -> bool:
        with self._session(f"set cool-down status to {status.value}") as session:
            row = session.get(CoolDownRow, cooldown_id)
            if row is None:
                return False
            row.status = status.value
            session.add(row)
            return True

    def expire_stale(self, now: datetime) -> int:
        statement = (
            select(CoolDownRow)
            .where(CoolDownRow.status == CoolDownStatus.ACTIVE.value)
            .where(CoolDownRow.expires_at < now)
        )
        with self._session("expire cool-downs") as session:
            rows = session.exec(statement).all()
            for row in rows:
                row.status = CoolDownStatus.EXPIRED.value
                session.add(row)
            return len(rows)


class SqlUserProfileStore(_SqlStore):
    """UserProfileStore backed by the user_profiles table."""

    def get(self, user_id: str) -> UserProfile | None:
        with self._session("get user profile") as session:
            row = session.get(UserProfileRow, user_id)
            return row_to_profile(row) if row else None

    def insert(self, user_id: str, fields: dict[str, Any]) -> UserProfile:
        row = UserProfileRow(id=user_id, **fields)
        with self._session("create user profile") as session:
            session.add(row)
            session.flush()
            session.refresh(row)
            return row_to_profile(row)

    def update(self, user_id: str, fields: dict[str, Any]) -> UserProfile | None:
        with self._session("update user profile") as session:
            row = session.get(UserProfileRow, user_id)
            if row is None:
                return None
            for name, value in fields.items():
                setattr(row, name, value)
            row.updated_at = utcnow()
            session.add(row)
            session.flush()
            session.refresh(row)
            return row_to_profile(row)


class SqlInterventionStore(_SqlStore):
    """InterventionStore backed by the interventions table."""

    def record(
        self,
        user_id: str,
        product: ProductRecord,
        recommendation: Recommendation,
        user_action: str,
    ) -> str:
        row = InterventionRow(
            user_id=user_id,
            product_info=snapshot(product),
            analysis_result=snapshot(recommendation),
            user_action=user_action,
        )
        with self._session("record intervention") as session:
            session.add(row)
            session.flush()
            return row.id
