from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterable, Mapping

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from extensions import db
from services.errors import ConflictError, InternalError, NotFoundError, RecordError


logger = logging.getLogger(__name__)

_DEPTH_KEY = "record_store_tx_depth"


class RecordStore:
    """
    Primitivas de persistencia sobre la sesión de Flask-SQLAlchemy.

    Las escrituras solo hacen flush: el commit lo decide `transaction()`, así
    un borrado en cascada o un lote de notas queda en una única transacción.
    Las violaciones de unicidad salen como ConflictError y los registros
    inexistentes como NotFoundError.
    """

    @staticmethod
    def get(model, record_id):
        if record_id is None:
            return None
        return db.session.get(model, record_id)

    @staticmethod
    def require(model, record_id, label: str | None = None):
        instance = RecordStore.get(model, record_id)
        if instance is None:
            raise NotFoundError(f"{label or model.__name__} inexistente.")
        return instance

    @staticmethod
    def find_one(model, **filters):
        return model.query.filter_by(**filters).first()

    @staticmethod
    def find_many(model, order_by=None, **filters) -> list:
        query = model.query.filter_by(**filters)
        if order_by is not None:
            query = query.order_by(order_by)
        return query.all()

    @staticmethod
    def count(model, **filters) -> int:
        return model.query.filter_by(**filters).count()

    @staticmethod
    def create(model, **values):
        return RecordStore.create_instance(model(**values))

    @staticmethod
    def create_instance(instance):
        """Para modelos que necesitan preparar algo antes de guardarse (p. ej. la contraseña)."""
        db.session.add(instance)
        RecordStore._flush()
        return instance

    @staticmethod
    def update(instance, values: Mapping[str, Any]):
        for field, value in values.items():
            setattr(instance, field, value)
        RecordStore._flush()
        return instance

    @staticmethod
    def delete(instance) -> None:
        db.session.delete(instance)
        RecordStore._flush()

    @staticmethod
    def delete_rows(rows: Iterable) -> int:
        deleted = 0
        for row in rows:
            db.session.delete(row)
            deleted += 1
        RecordStore._flush()
        return deleted

    @staticmethod
    @contextmanager
    def transaction():
        """
        Unidad de trabajo atómica. Anidable: solo el bloque más externo hace
        commit o rollback.
        """
        session = db.session()
        depth = session.info.get(_DEPTH_KEY, 0)
        session.info[_DEPTH_KEY] = depth + 1
        try:
            yield session
            if depth == 0:
                session.commit()
        except RecordError:
            if depth == 0:
                session.rollback()
            raise
        except IntegrityError as exc:
            if depth == 0:
                session.rollback()
            raise ConflictError("El registro viola una restricción de unicidad.") from exc
        except SQLAlchemyError as exc:
            if depth == 0:
                session.rollback()
            logger.exception("Fallo del store durante la transacción: %s", exc)
            raise InternalError("Error interno de persistencia.") from exc
        except Exception:
            if depth == 0:
                session.rollback()
            raise
        finally:
            session.info[_DEPTH_KEY] = depth

    @staticmethod
    def _flush() -> None:
        try:
            db.session.flush()
        except IntegrityError as exc:
            raise ConflictError("El registro viola una restricción de unicidad.") from exc
