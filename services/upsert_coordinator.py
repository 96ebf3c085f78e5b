from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Mapping, Optional

from models import BimonthlyGrade, Evaluation
from services.access_guard import AccessGuard, EntityType, Operation
from services.errors import ValidationError
from services.reference_validator import ReferenceValidator
from services.store import RecordStore
from services.tenancy import TenantResolver


logger = logging.getLogger(__name__)

PERIODS = (1, 2, 3, 4)


def _number(payload: Mapping, field: str, *, required: bool = True) -> Optional[float]:
    raw = payload.get(field)
    if raw is None or raw == "":
        if required:
            raise ValidationError(f"'{field}' es obligatorio.", field=field)
        return None
    if isinstance(raw, bool):
        raise ValidationError(f"'{field}' debe ser numérico.", field=field)
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"'{field}' debe ser numérico.", field=field) from exc
    if value < 0:
        raise ValidationError(f"'{field}' no puede ser negativo.", field=field)
    return value


def _period(payload: Mapping) -> int:
    raw = payload.get("period")
    if isinstance(raw, (bool, float)):
        raw = None
    try:
        period = int(str(raw).strip())
    except (TypeError, ValueError):
        period = None
    if period not in PERIODS:
        raise ValidationError("El bimestre debe ser un número entre 1 y 4.", field="period")
    return period


def _flag(raw) -> Optional[bool]:
    # El formulario manda "Sim"/"Não" o booleanos
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in {"true", "1", "sim", "si", "sí", "yes"}:
        return True
    if text in {"false", "0", "nao", "não", "no"}:
        return False
    raise ValidationError("'on_time' debe ser verdadero o falso.", field="on_time")


class UpsertCoordinator:
    """
    Create-or-update idempotente sobre claves naturales compuestas:

    - Evaluation: (student_id, activity_id)
    - BimonthlyGrade: (student_id, subject_id, period)

    Repetir la misma llamada deja el mismo estado, nunca filas duplicadas.
    """

    # ---------------------------------------------------------
    # Evaluaciones
    # ---------------------------------------------------------

    @staticmethod
    def upsert_evaluation(claims, payload: Mapping, requested_school_id=None):
        school_id = TenantResolver.for_write(claims, requested_school_id)

        refs = ReferenceValidator.validate_references(
            EntityType.EVALUATION,
            school_id,
            {
                "student_id": payload.get("student_id"),
                "activity_id": payload.get("activity_id"),
            },
        )
        student = refs["student_id"]
        activity = refs["activity_id"]

        existing = RecordStore.find_one(Evaluation, student_id=student.id, activity_id=activity.id)
        operation = Operation.UPDATE if existing else Operation.CREATE
        AccessGuard.require(claims, EntityType.EVALUATION, operation, owner_id=activity.teacher_id)

        score = _number(payload, "score")
        if score > activity.max_score:
            raise ValidationError(
                f"La nota {score:g} supera la nota máxima permitida de {activity.max_score:g}.",
                field="score",
            )

        values = {
            "score": score,
            "narrative": payload.get("narrative"),
            "on_time": _flag(payload.get("on_time")),
            "evaluated_at": datetime.utcnow(),
        }

        teacher = None
        if not existing:
            teacher_id = payload.get("teacher_id")
            if teacher_id in (None, ""):
                teacher_id = activity.teacher_id if claims.is_admin else claims.actor_id
            teacher = ReferenceValidator.validate_references(
                EntityType.EVALUATION, school_id, {"teacher_id": teacher_id}
            )["teacher_id"]
            AccessGuard.require(claims, EntityType.EVALUATION, Operation.CREATE, owner_id=teacher.id)

        with RecordStore.transaction():
            if existing:
                evaluation = RecordStore.update(existing, values)
            else:
                evaluation = RecordStore.create(
                    Evaluation,
                    student_id=student.id,
                    activity_id=activity.id,
                    teacher_id=teacher.id,
                    **values,
                )

        return evaluation

    # ---------------------------------------------------------
    # Notas bimestrales
    # ---------------------------------------------------------

    @staticmethod
    def _prepare_grade(school_id: int, item: Mapping) -> dict:
        """Valida un ítem completo (valores y referencias) sin escribir nada."""
        refs = ReferenceValidator.validate_references(
            EntityType.BIMONTHLY_GRADE,
            school_id,
            {"student_id": item.get("student_id"), "subject_id": item.get("subject_id")},
        )
        return {
            "student_id": refs["student_id"].id,
            "subject_id": refs["subject_id"].id,
            "period": _period(item),
            "score": _number(item, "score"),
            "remediation_score": _number(item, "remediation_score", required=False),
        }

    @staticmethod
    def _write_grade(prepared: dict) -> BimonthlyGrade:
        existing = RecordStore.find_one(
            BimonthlyGrade,
            student_id=prepared["student_id"],
            subject_id=prepared["subject_id"],
            period=prepared["period"],
        )
        values = {"score": prepared["score"], "remediation_score": prepared["remediation_score"]}
        if existing:
            return RecordStore.update(existing, values)
        return RecordStore.create(BimonthlyGrade, **prepared)

    @staticmethod
    def _require_grade_write(claims) -> None:
        # CREATE y UPDATE tienen el mismo permiso en todos los roles; se piden los dos
        AccessGuard.require(claims, EntityType.BIMONTHLY_GRADE, Operation.CREATE)
        AccessGuard.require(claims, EntityType.BIMONTHLY_GRADE, Operation.UPDATE)

    @staticmethod
    def upsert_grade(claims, payload: Mapping, requested_school_id=None) -> BimonthlyGrade:
        UpsertCoordinator._require_grade_write(claims)
        school_id = TenantResolver.for_write(claims, requested_school_id)

        prepared = UpsertCoordinator._prepare_grade(school_id, payload)
        with RecordStore.transaction():
            grade = UpsertCoordinator._write_grade(prepared)
        return grade

    @staticmethod
    def upsert_grades_batch(
        claims,
        items: Iterable[Mapping],
        requested_school_id=None,
        student_id=None,
    ) -> list:
        """
        Todo o nada: se validan todos los ítems antes de escribir el primero, y
        las escrituras van en una única transacción.

        Si se pasa student_id, aplica a los ítems que no traen el suyo.
        """
        UpsertCoordinator._require_grade_write(claims)
        school_id = TenantResolver.for_write(claims, requested_school_id)

        if items is None or isinstance(items, (str, bytes, Mapping)):
            raise ValidationError("Se esperaba una lista de notas.", field="grades")
        items = list(items)
        if not items:
            raise ValidationError("La lista de notas está vacía.", field="grades")

        prepared_items = []
        seen_keys = set()
        for index, item in enumerate(items):
            if not isinstance(item, Mapping):
                raise ValidationError(f"El ítem {index} no es un objeto.", field="grades")
            if student_id is not None and item.get("student_id") in (None, ""):
                item = {**item, "student_id": student_id}

            prepared = UpsertCoordinator._prepare_grade(school_id, item)
            key = (prepared["student_id"], prepared["subject_id"], prepared["period"])
            if key in seen_keys:
                raise ValidationError(
                    f"Nota repetida en el lote (alumno {key[0]}, materia {key[1]}, bimestre {key[2]}).",
                    field="grades",
                )
            seen_keys.add(key)
            prepared_items.append(prepared)

        with RecordStore.transaction():
            grades = [UpsertCoordinator._write_grade(prepared) for prepared in prepared_items]

        logger.info(
            "Lote de %s notas guardado por %s en la escuela %s",
            len(grades),
            claims.actor_id,
            school_id,
        )
        return grades
