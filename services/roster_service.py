from __future__ import annotations

import logging

from models import Activity, BimonthlyGrade, SchoolClass, Student, Subject
from services.access_guard import AccessGuard, EntityType, Operation
from services.cascade_deleter import CascadeDeleter
from services.errors import ConflictError
from services.payloads import optional_int, required_text
from services.reference_validator import ReferenceValidator
from services.store import RecordStore
from services.tenancy import TenantResolver, load_in_school


logger = logging.getLogger(__name__)


class RosterService:
    """
    Turmas, materias y alumnos de una escuela.

    Los nombres de turma y materia son únicos dentro de la escuela; la
    matrícula del alumno es única en todo el sistema.
    """

    # -------------------------
    # TURMAS
    # -------------------------

    @staticmethod
    def list_classes(claims, requested_school_id=None) -> list:
        AccessGuard.require(claims, EntityType.SCHOOL_CLASS, Operation.LIST)
        school_id = TenantResolver.for_listing(claims, requested_school_id)
        if school_id is None:
            return []
        return RecordStore.find_many(SchoolClass, order_by=SchoolClass.name, school_id=school_id)

    @staticmethod
    def _named_in_school(model, school_id: int, name: str, exclude_id=None, message: str = "") -> None:
        clash = RecordStore.find_one(model, school_id=school_id, name=name)
        if clash and clash.id != exclude_id:
            raise ConflictError(message)

    @staticmethod
    def create_class(claims, payload, requested_school_id=None) -> SchoolClass:
        AccessGuard.require(claims, EntityType.SCHOOL_CLASS, Operation.CREATE)
        school_id = TenantResolver.for_write(claims, requested_school_id)
        name = required_text(payload, "name", "El nombre de la turma es obligatorio.")

        RosterService._named_in_school(
            SchoolClass, school_id, name, message="Ya existe una turma con este nombre."
        )
        with RecordStore.transaction():
            school_class = RecordStore.create(SchoolClass, school_id=school_id, name=name)
        return school_class

    @staticmethod
    def update_class(claims, class_id, payload, requested_school_id=None) -> SchoolClass:
        AccessGuard.require(claims, EntityType.SCHOOL_CLASS, Operation.UPDATE)
        school_id = TenantResolver.for_write(claims, requested_school_id)
        school_class = load_in_school(SchoolClass, class_id, school_id, "turma")
        name = required_text(payload, "name", "El nombre de la turma es obligatorio.")

        RosterService._named_in_school(
            SchoolClass,
            school_id,
            name,
            exclude_id=school_class.id,
            message="Ya existe una turma con este nombre.",
        )
        with RecordStore.transaction():
            RecordStore.update(school_class, {"name": name})
        return school_class

    @staticmethod
    def delete_class(claims, class_id, requested_school_id=None) -> None:
        AccessGuard.require(claims, EntityType.SCHOOL_CLASS, Operation.DELETE)
        school_id = TenantResolver.for_write(claims, requested_school_id)
        school_class = load_in_school(SchoolClass, class_id, school_id, "turma")

        if RecordStore.count(Student, class_id=school_class.id):
            raise ConflictError("La turma tiene alumnos matriculados y no puede borrarse.")

        with RecordStore.transaction():
            RecordStore.delete(school_class)

    # -------------------------
    # MATERIAS
    # -------------------------

    @staticmethod
    def list_subjects(claims, requested_school_id=None) -> list:
        AccessGuard.require(claims, EntityType.SUBJECT, Operation.LIST)
        school_id = TenantResolver.for_listing(claims, requested_school_id)
        if school_id is None:
            return []
        return RecordStore.find_many(Subject, order_by=Subject.name, school_id=school_id)

    @staticmethod
    def create_subject(claims, payload, requested_school_id=None) -> Subject:
        AccessGuard.require(claims, EntityType.SUBJECT, Operation.CREATE)
        school_id = TenantResolver.for_write(claims, requested_school_id)
        name = required_text(payload, "name", "El nombre de la materia es obligatorio.")

        RosterService._named_in_school(
            Subject, school_id, name, message="Ya existe una materia con este nombre."
        )
        with RecordStore.transaction():
            subject = RecordStore.create(Subject, school_id=school_id, name=name)
        return subject

    @staticmethod
    def update_subject(claims, subject_id, payload, requested_school_id=None) -> Subject:
        AccessGuard.require(claims, EntityType.SUBJECT, Operation.UPDATE)
        school_id = TenantResolver.for_write(claims, requested_school_id)
        subject = load_in_school(Subject, subject_id, school_id, "materia")
        name = required_text(payload, "name", "El nombre de la materia es obligatorio.")

        RosterService._named_in_school(
            Subject,
            school_id,
            name,
            exclude_id=subject.id,
            message="Ya existe una materia con este nombre.",
        )
        with RecordStore.transaction():
            RecordStore.update(subject, {"name": name})
        return subject

    @staticmethod
    def delete_subject(claims, subject_id, requested_school_id=None) -> None:
        AccessGuard.require(claims, EntityType.SUBJECT, Operation.DELETE)
        school_id = TenantResolver.for_write(claims, requested_school_id)
        subject = load_in_school(Subject, subject_id, school_id, "materia")

        in_use = RecordStore.count(Activity, subject_id=subject.id) + RecordStore.count(
            BimonthlyGrade, subject_id=subject.id
        )
        if in_use:
            raise ConflictError("La materia tiene actividades o notas asociadas y no puede borrarse.")

        with RecordStore.transaction():
            RecordStore.delete(subject)

    # -------------------------
    # ALUMNOS
    # -------------------------

    @staticmethod
    def list_students(claims, requested_school_id=None, class_id=None) -> list:
        AccessGuard.require(claims, EntityType.STUDENT, Operation.LIST)
        school_id = TenantResolver.for_listing(claims, requested_school_id)
        if school_id is None:
            return []

        filters = {"school_id": school_id}
        if class_id not in (None, ""):
            filters["class_id"] = optional_int({"class_id": class_id}, "class_id")
        return RecordStore.find_many(Student, order_by=Student.name, **filters)

    @staticmethod
    def get_student(claims, student_id, requested_school_id=None) -> Student:
        AccessGuard.require(claims, EntityType.STUDENT, Operation.READ)
        school_id = TenantResolver.for_read(claims, requested_school_id)
        return load_in_school(Student, student_id, school_id, "alumno")

    @staticmethod
    def _check_registration(registration_number: str, exclude_id=None) -> None:
        clash = RecordStore.find_one(Student, registration_number=registration_number)
        if clash and clash.id != exclude_id:
            raise ConflictError("Ya existe un alumno con esta matrícula.")

    @staticmethod
    def create_student(claims, payload, requested_school_id=None) -> Student:
        AccessGuard.require(claims, EntityType.STUDENT, Operation.CREATE)
        school_id = TenantResolver.for_write(claims, requested_school_id)

        name = required_text(payload, "name", "El nombre del alumno es obligatorio.")
        registration_number = required_text(
            payload, "registration_number", "La matrícula es obligatoria."
        )
        refs = ReferenceValidator.validate_references(
            EntityType.STUDENT, school_id, {"class_id": payload.get("class_id")}
        )
        age = optional_int(payload, "age")

        RosterService._check_registration(registration_number)

        with RecordStore.transaction():
            student = RecordStore.create(
                Student,
                name=name,
                registration_number=registration_number,
                age=age,
                class_id=refs["class_id"].id,
                school_id=school_id,
            )
        logger.info("Alumno %s creado en la escuela %s", student.id, school_id)
        return student

    @staticmethod
    def update_student(claims, student_id, payload, requested_school_id=None) -> Student:
        AccessGuard.require(claims, EntityType.STUDENT, Operation.UPDATE)
        school_id = TenantResolver.for_write(claims, requested_school_id)
        student = load_in_school(Student, student_id, school_id, "alumno")

        values = {}
        if "name" in payload:
            values["name"] = required_text(payload, "name", "El nombre del alumno es obligatorio.")
        if "registration_number" in payload:
            values["registration_number"] = required_text(
                payload, "registration_number", "La matrícula es obligatoria."
            )
            RosterService._check_registration(values["registration_number"], exclude_id=student.id)
        if "age" in payload:
            values["age"] = optional_int(payload, "age")
        if "class_id" in payload:
            refs = ReferenceValidator.validate_references(
                EntityType.STUDENT, school_id, {"class_id": payload.get("class_id")}
            )
            values["class_id"] = refs["class_id"].id

        with RecordStore.transaction():
            RecordStore.update(student, values)
        return student

    @staticmethod
    def delete_student(claims, student_id, requested_school_id=None) -> dict:
        return CascadeDeleter.delete_student(claims, student_id, requested_school_id)
