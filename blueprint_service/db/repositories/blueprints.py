"""
Blueprint repository.

``BlueprintStore`` owns the two blueprint tables and implements save, lookup,
listing, point-append and delete. Each operation runs in its own session and
transaction and returns a ``Result`` instead of raising for expected outcomes.
The module-level helpers take a ``Session`` so they compose inside a single
unit of work.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from blueprint_service.db import models, schemas
from blueprint_service.db.database import make_session_factory
from blueprint_service.db.reconstruction import fold_rows
from blueprint_service.db.results import Failure, Ok, Result

logger = logging.getLogger(__name__)

DEFAULT_APPEND_ATTEMPTS = 3


def header_exists(db: Session, author: str, name: str) -> bool:
    return (
        db.query(models.Blueprint.author)
        .filter(models.Blueprint.author == author, models.Blueprint.name == name)
        .first()
        is not None
    )


def lock_header(db: Session, author: str, name: str) -> Optional[models.Blueprint]:
    """Load the header row with ``SELECT ... FOR UPDATE`` (a no-op on SQLite)."""
    return (
        db.query(models.Blueprint)
        .filter(models.Blueprint.author == author, models.Blueprint.name == name)
        .with_for_update()
        .first()
    )


def next_position_index(db: Session, author: str, name: str) -> int:
    return db.query(
        func.coalesce(func.max(models.BlueprintPoint.position_index), -1) + 1
    ).filter(
        models.BlueprintPoint.author == author,
        models.BlueprintPoint.blueprint_name == name,
    ).scalar()


def blueprint_rows(db: Session):
    """Headers left-joined with their points, one row per point."""
    return db.query(
        models.Blueprint.author,
        models.Blueprint.name,
        models.BlueprintPoint.x,
        models.BlueprintPoint.y,
        models.BlueprintPoint.position_index,
    ).outerjoin(models.Blueprint.points)


class BlueprintStore:
    """Relational store for blueprint aggregates.

    Construct once with an engine and pass the instance to whoever needs it.
    The schema is created on construction if it does not exist yet.
    """

    def __init__(self, engine: Engine, *, append_attempts: int = DEFAULT_APPEND_ATTEMPTS):
        if append_attempts < 1:
            raise ValueError("append_attempts must be at least 1")
        self._engine = engine
        self._session_factory = make_session_factory(engine)
        self._append_attempts = append_attempts
        self.ensure_schema()

    def ensure_schema(self) -> None:
        models.Base.metadata.create_all(bind=self._engine)

    @contextmanager
    def _unit_of_work(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def _storage_failure(self, operation: str, exc: Exception) -> Failure:
        logger.error("blueprint_storage_error: op=%s error=%s", operation, exc, exc_info=exc)
        return Failure.storage_error(f"Storage failure during {operation}: {exc}")

    def save_blueprint(self, blueprint: schemas.BlueprintBase) -> Result[schemas.Blueprint]:
        author, name = blueprint.author, blueprint.name
        try:
            with self._unit_of_work() as db:
                db.add(models.Blueprint(author=author, name=name))
                # Header first so a duplicate key surfaces before any point insert
                db.flush()
                for index, point in enumerate(blueprint.points):
                    db.add(models.BlueprintPoint(
                        author=author,
                        blueprint_name=name,
                        x=point.x,
                        y=point.y,
                        position_index=index,
                    ))
        except IntegrityError as exc:
            try:
                with self._unit_of_work() as db:
                    duplicate = header_exists(db, author, name)
            except SQLAlchemyError as check_exc:
                return self._storage_failure("save_blueprint", check_exc)
            if duplicate:
                logger.warning("blueprint_conflict: author=%s name=%s", author, name)
                return Failure.conflict(f"Blueprint already exists: {author}/{name}")
            return self._storage_failure("save_blueprint", exc)
        except (SQLAlchemyError, OverflowError) as exc:
            # sqlite3 raises OverflowError itself for integers outside 64 bits
            return self._storage_failure("save_blueprint", exc)

        logger.info("blueprint_saved: author=%s name=%s points=%d", author, name, len(blueprint.points))
        return Ok(schemas.Blueprint(author=author, name=name, points=list(blueprint.points)))

    def get_blueprint(self, author: str, name: str) -> Result[schemas.Blueprint]:
        not_found = Failure.not_found(f"Blueprint not found: {author}/{name}")
        try:
            with self._unit_of_work() as db:
                if not header_exists(db, author, name):
                    return not_found
                rows = (
                    blueprint_rows(db)
                    .filter(models.Blueprint.author == author, models.Blueprint.name == name)
                    .order_by(models.BlueprintPoint.position_index)
                    .all()
                )
                blueprints = fold_rows(rows)
        except (SQLAlchemyError, ValidationError) as exc:
            return self._storage_failure("get_blueprint", exc)
        if not blueprints:
            # Header removed between the existence check and the read
            return not_found
        return Ok(blueprints[0])

    def get_blueprints_by_author(self, author: str) -> Result[List[schemas.Blueprint]]:
        try:
            with self._unit_of_work() as db:
                rows = (
                    blueprint_rows(db)
                    .filter(models.Blueprint.author == author)
                    .order_by(models.Blueprint.name, models.BlueprintPoint.position_index)
                    .all()
                )
                blueprints = fold_rows(rows)
        except (SQLAlchemyError, ValidationError) as exc:
            return self._storage_failure("get_blueprints_by_author", exc)
        if not blueprints:
            return Failure.not_found(f"No blueprints for author: {author}")
        return Ok(blueprints)

    def get_all_blueprints(self) -> Result[List[schemas.Blueprint]]:
        try:
            with self._unit_of_work() as db:
                rows = (
                    blueprint_rows(db)
                    .order_by(
                        models.Blueprint.author,
                        models.Blueprint.name,
                        models.BlueprintPoint.position_index,
                    )
                    .all()
                )
                blueprints = fold_rows(rows)
        except (SQLAlchemyError, ValidationError) as exc:
            return self._storage_failure("get_all_blueprints", exc)
        return Ok(blueprints)

    def append_point(self, author: str, name: str, x: int, y: int) -> Result[int]:
        """Append one point and return the position index it was stored at.

        The header row lock serializes concurrent appends where the dialect
        supports it; elsewhere a collision on the unique position constraint
        rolls back and the append is retried up to ``append_attempts`` times.
        """
        last_error: Optional[IntegrityError] = None
        for attempt in range(1, self._append_attempts + 1):
            try:
                with self._unit_of_work() as db:
                    if lock_header(db, author, name) is None:
                        return Failure.not_found(f"Blueprint not found: {author}/{name}")
                    index = next_position_index(db, author, name)
                    db.add(models.BlueprintPoint(
                        author=author,
                        blueprint_name=name,
                        x=x,
                        y=y,
                        position_index=index,
                    ))
            except IntegrityError as exc:
                last_error = exc
                logger.warning(
                    "append_point_collision: author=%s name=%s attempt=%d/%d",
                    author, name, attempt, self._append_attempts,
                )
                continue
            except (SQLAlchemyError, OverflowError) as exc:
                return self._storage_failure("append_point", exc)

            logger.info("point_appended: author=%s name=%s index=%d", author, name, index)
            return Ok(index)

        return self._storage_failure("append_point", last_error)

    def delete_blueprint(self, author: str, name: str) -> Result[None]:
        try:
            with self._unit_of_work() as db:
                header = lock_header(db, author, name)
                if header is None:
                    return Failure.not_found(f"Blueprint not found: {author}/{name}")
                db.delete(header)
        except SQLAlchemyError as exc:
            return self._storage_failure("delete_blueprint", exc)
        logger.info("blueprint_deleted: author=%s name=%s", author, name)
        return Ok(None)
