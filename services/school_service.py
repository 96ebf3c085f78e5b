from __future__ import annotations

import logging

from models import Activity, School, SchoolClass, Student, Subject, Teacher
from services.access_guard import AccessGuard, EntityType, Operation
from services.errors import ConflictError, ForbiddenError
from services.payloads import optional_text, required_text
from services.store import RecordStore
from services.tenancy import TenantResolver


logger = logging.getLogger(__name__)


class SchoolService:
    """
    ABM de escuelas. Solo el Administrador crea, edita o borra; el resto ve
    únicamente su propia escuela.
    """

    @staticmethod
    def list_schools(claims) -> list:
        AccessGuard.require(claims, EntityType.SCHOOL, Operation.LIST)
        if claims.is_admin:
            return RecordStore.find_many(School, order_by=School.name)

        school_id = TenantResolver.for_read(claims)
        school = RecordStore.get(School, school_id)
        return [school] if school else []

    @staticmethod
    def get_school(claims, school_id) -> School:
        AccessGuard.require(claims, EntityType.SCHOOL, Operation.READ)
        school = RecordStore.require(School, school_id, "Escuela")
        if not claims.is_admin and school.id != TenantResolver.for_read(claims):
            raise ForbiddenError("Acceso negado.")
        return school

    @staticmethod
    def create_school(claims, payload) -> School:
        AccessGuard.require(claims, EntityType.SCHOOL, Operation.CREATE)
        name = required_text(payload, "name", "El nombre de la escuela es obligatorio.")

        if RecordStore.find_one(School, name=name):
            raise ConflictError("Ya existe una escuela con este nombre.")

        with RecordStore.transaction():
            school = RecordStore.create(School, name=name, address=optional_text(payload, "address"))
        logger.info("Escuela %s creada por %s", school.id, claims.actor_id)
        return school

    @staticmethod
    def update_school(claims, school_id, payload) -> School:
        AccessGuard.require(claims, EntityType.SCHOOL, Operation.UPDATE)
        school = RecordStore.require(School, school_id, "Escuela")
        name = required_text(payload, "name", "El nombre de la escuela es obligatorio.")

        duplicate = RecordStore.find_one(School, name=name)
        if duplicate and duplicate.id != school.id:
            raise ConflictError("Ya existe una escuela con este nombre.")

        values = {"name": name}
        if "address" in payload:
            values["address"] = optional_text(payload, "address")

        with RecordStore.transaction():
            RecordStore.update(school, values)
        return school

    @staticmethod
    def delete_school(claims, school_id) -> None:
        AccessGuard.require(claims, EntityType.SCHOOL, Operation.DELETE)
        school = RecordStore.require(School, school_id, "Escuela")

        dependents = {
            "docentes": RecordStore.count(Teacher, school_id=school.id),
            "turmas": RecordStore.count(SchoolClass, school_id=school.id),
            "materias": RecordStore.count(Subject, school_id=school.id),
            "alumnos": RecordStore.count(Student, school_id=school.id),
            "actividades": RecordStore.count(Activity, school_id=school.id),
        }
        in_use = [label for label, total in dependents.items() if total]
        if in_use:
            raise ConflictError(
                f"La escuela tiene registros asociados ({', '.join(in_use)}) y no puede borrarse."
            )

        with RecordStore.transaction():
            RecordStore.delete(school)
        logger.info("Escuela %s borrada por %s", school_id, claims.actor_id)
