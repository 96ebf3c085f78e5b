from __future__ import annotations

import logging
from typing import Mapping

from models import Activity, SchoolClass, Student, Subject, Teacher
from services.access_guard import EntityType
from services.errors import NotFoundError, TenantMismatchError, ValidationError
from services.store import RecordStore


logger = logging.getLogger(__name__)


# Qué referencias puede traer cada tipo de entidad y a qué modelo apuntan
REFERENCE_MAP = {
    EntityType.STUDENT: {"class_id": (SchoolClass, "Turma")},
    EntityType.ACTIVITY: {
        "subject_id": (Subject, "Materia"),
        "teacher_id": (Teacher, "Docente"),
    },
    EntityType.EVALUATION: {
        "student_id": (Student, "Alumno"),
        "activity_id": (Activity, "Actividad"),
        "teacher_id": (Teacher, "Docente"),
    },
    EntityType.BIMONTHLY_GRADE: {
        "student_id": (Student, "Alumno"),
        "subject_id": (Subject, "Materia"),
    },
    EntityType.OBSERVATION: {
        "student_id": (Student, "Alumno"),
        "teacher_id": (Teacher, "Docente"),
    },
    EntityType.CONDITION: {"student_id": (Student, "Alumno")},
    EntityType.INSIGHT: {"student_id": (Student, "Alumno")},
}


def _as_id(ref_name: str, raw):
    if isinstance(raw, bool):
        raise ValidationError(f"'{ref_name}' debe ser un ID numérico.", field=ref_name)
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"'{ref_name}' debe ser un ID numérico.", field=ref_name) from exc


class ReferenceValidator:
    """
    Verifica, antes de persistir nada, que cada ID referenciado exista y
    pertenezca a la escuela de operación.

    - no existe en ninguna escuela -> NotFoundError
    - existe pero en otra escuela -> TenantMismatchError (403)
    """

    @staticmethod
    def validate_references(entity_type: EntityType, school_id: int, refs: Mapping) -> dict:
        known = REFERENCE_MAP.get(entity_type, {})
        loaded = {}

        for ref_name, raw_id in refs.items():
            if ref_name not in known:
                raise ValidationError(
                    f"Referencia '{ref_name}' desconocida para {entity_type.value}.",
                    field=ref_name,
                )
            if raw_id is None or raw_id == "":
                raise ValidationError(f"'{ref_name}' es obligatorio.", field=ref_name)

            model, label = known[ref_name]
            entity = RecordStore.get(model, _as_id(ref_name, raw_id))
            if entity is None:
                raise NotFoundError(f"{label} inexistente.")

            if entity.owning_school_id != school_id:
                logger.warning(
                    "Referencia cruzada: %s=%s pertenece a la escuela %s, operación en %s",
                    ref_name,
                    raw_id,
                    entity.owning_school_id,
                    school_id,
                )
                raise TenantMismatchError(ref_name)

            loaded[ref_name] = entity

        return loaded
