"""
Record store client - table-scoped row access
"""
import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import asc, delete, desc, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from negocio.database import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class StoreError(Exception):
    """Any failure reported by the record store (connection, constraint, ...)"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TableRepository(Generic[ModelT]):
    """
    Row-level select/insert/update/delete against one table

    Filters are equality matches on column names. Every write commits by
    default; pass ``commit=False`` to stage several writes and finish them
    with :meth:`commit`, so they succeed or roll back together.
    """

    model: Type[ModelT]

    def __init__(self, db: Session):
        self.db = db

    @property
    def table(self) -> str:
        return self.model.__tablename__

    def _conditions(self, filters: Optional[Dict[str, Any]]):
        return [getattr(self.model, column) == value for column, value in (filters or {}).items()]

    def _fail(self, operation: str, error: SQLAlchemyError) -> StoreError:
        self.db.rollback()
        logger.debug("Rolled back session after failed %s on %s", operation, self.table)
        return StoreError(f"{operation} on {self.table} failed: {error}")

    def select(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[ModelT]:
        """Rows matching every filter, optionally ordered and limited"""
        query = self.db.query(self.model).filter(*self._conditions(filters))
        if order_by:
            column = getattr(self.model, order_by)
            query = query.order_by(desc(column) if descending else asc(column))
        if limit is not None:
            query = query.limit(limit)
        try:
            return query.all()
        except SQLAlchemyError as e:
            raise self._fail("select", e)

    def select_one(self, filters: Dict[str, Any]) -> Optional[ModelT]:
        """First row matching the filters or None"""
        try:
            return self.db.query(self.model).filter(*self._conditions(filters)).first()
        except SQLAlchemyError as e:
            raise self._fail("select", e)

    def insert(self, rows: List[Dict[str, Any]], commit: bool = True) -> List[ModelT]:
        """
        Insert rows and return them with generated ids and timestamps

        Args:
            rows: Column values per row
            commit: Commit immediately (default) or leave the transaction open

        Raises:
            StoreError: On any database error; the session is rolled back
        """
        objects = [self.model(**row) for row in rows]
        try:
            self.db.add_all(objects)
            self.db.flush()
            if commit:
                self.db.commit()
                for obj in objects:
                    self.db.refresh(obj)
        except SQLAlchemyError as e:
            raise self._fail("insert", e)
        return objects

    def update(self, fields: Dict[str, Any], filters: Dict[str, Any], commit: bool = True) -> List[ModelT]:
        """Apply the given fields to every matching row and return the updated rows"""
        try:
            objects = self.db.query(self.model).filter(*self._conditions(filters)).all()
            for obj in objects:
                for column, value in fields.items():
                    setattr(obj, column, value)
            self.db.flush()
            if commit:
                self.db.commit()
                for obj in objects:
                    self.db.refresh(obj)
        except SQLAlchemyError as e:
            raise self._fail("update", e)
        return objects

    def delete(self, filters: Dict[str, Any], commit: bool = True) -> int:
        """
        Delete matching rows and return how many went

        Issued as a single DELETE statement so that the store's own
        ON DELETE rules decide what happens to dependent rows.
        """
        statement = delete(self.model).where(*self._conditions(filters))
        try:
            result = self.db.execute(statement, execution_options={"synchronize_session": False})
            if commit:
                self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete", e)
        return result.rowcount

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        try:
            return self.db.query(func.count(self.model.id)).filter(*self._conditions(filters)).scalar()
        except SQLAlchemyError as e:
            raise self._fail("count", e)

    def commit(self) -> None:
        """Commit writes staged with ``commit=False``"""
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("commit", e)

    def rollback(self) -> None:
        self.db.rollback()
