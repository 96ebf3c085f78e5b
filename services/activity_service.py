from __future__ import annotations

import logging

from models import Activity
from services.access_guard import AccessGuard, EntityType, Operation
from services.cascade_deleter import CascadeDeleter
from services.errors import ValidationError
from services.payloads import optional_bool, optional_text, required_text
from services.reference_validator import ReferenceValidator
from services.store import RecordStore
from services.tenancy import TenantResolver, load_in_school


logger = logging.getLogger(__name__)

DEFAULT_MAX_SCORE = 10.0


def _max_score(payload) -> float:
    raw = payload.get("max_score")
    if raw in (None, ""):
        return DEFAULT_MAX_SCORE
    if isinstance(raw, bool):
        raise ValidationError("La nota máxima debe ser numérica.", field="max_score")
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError("La nota máxima debe ser numérica.", field="max_score") from exc
    if value <= 0:
        raise ValidationError("La nota máxima debe ser mayor que cero.", field="max_score")
    return value


def _descriptive_fields(payload, partial: bool = False) -> dict:
    values = {}
    if not partial or "kind" in payload:
        values["kind"] = required_text(payload, "kind", "El tipo de actividad es obligatorio.")
    for field in ("location", "completion_time", "dynamics", "description"):
        if not partial or field in payload:
            values[field] = optional_text(payload, field)
    for field in ("open_book", "creative_freedom"):
        if not partial or field in payload:
            values[field] = optional_bool(payload, field)
    if not partial or "max_score" in payload:
        values["max_score"] = _max_score(payload)
    return values


class ActivityService:
    """
    Actividades evaluables. Un Professor solo crea o edita actividades a su
    propio nombre; borrar es de Supervisor o Administrador y arrastra las
    evaluaciones.
    """

    @staticmethod
    def list_activities(claims, requested_school_id=None) -> list:
        AccessGuard.require(claims, EntityType.ACTIVITY, Operation.LIST)
        school_id = TenantResolver.for_listing(claims, requested_school_id)
        if school_id is None:
            return []
        return RecordStore.find_many(Activity, order_by=Activity.created_at.desc(), school_id=school_id)

    @staticmethod
    def create_activity(claims, payload, requested_school_id=None) -> Activity:
        school_id = TenantResolver.for_write(claims, requested_school_id)

        teacher_id = payload.get("teacher_id")
        if teacher_id in (None, "") and not claims.is_admin:
            teacher_id = claims.actor_id

        refs = ReferenceValidator.validate_references(
            EntityType.ACTIVITY,
            school_id,
            {"subject_id": payload.get("subject_id"), "teacher_id": teacher_id},
        )
        teacher = refs["teacher_id"]
        AccessGuard.require(claims, EntityType.ACTIVITY, Operation.CREATE, owner_id=teacher.id)

        values = _descriptive_fields(payload)
        with RecordStore.transaction():
            activity = RecordStore.create(
                Activity,
                school_id=school_id,
                subject_id=refs["subject_id"].id,
                teacher_id=teacher.id,
                **values,
            )
        return activity

    @staticmethod
    def update_activity(claims, activity_id, payload, requested_school_id=None) -> Activity:
        school_id = TenantResolver.for_write(claims, requested_school_id)
        activity = load_in_school(Activity, activity_id, school_id, "actividad")
        AccessGuard.require(claims, EntityType.ACTIVITY, Operation.UPDATE, owner_id=activity.teacher_id)

        refs_in = {
            name: payload.get(name) for name in ("subject_id", "teacher_id") if name in payload
        }
        refs = ReferenceValidator.validate_references(EntityType.ACTIVITY, school_id, refs_in)

        values = _descriptive_fields(payload, partial=True)
        if "subject_id" in refs:
            values["subject_id"] = refs["subject_id"].id
        if "teacher_id" in refs:
            # Un Professor no puede pasarle la actividad a otro docente
            AccessGuard.require(
                claims, EntityType.ACTIVITY, Operation.UPDATE, owner_id=refs["teacher_id"].id
            )
            values["teacher_id"] = refs["teacher_id"].id

        with RecordStore.transaction():
            RecordStore.update(activity, values)
        return activity

    @staticmethod
    def delete_activity(claims, activity_id, requested_school_id=None) -> dict:
        return CascadeDeleter.delete_activity(claims, activity_id, requested_school_id)
