from __future__ import annotations

import logging

from models import (
    Activity,
    BimonthlyGrade,
    Evaluation,
    Insight,
    Observation,
    Student,
    StudentCondition,
)
from services.access_guard import AccessGuard, EntityType, Operation
from services.errors import ConflictError, NotFoundError, ValidationError
from services.payloads import optional_int, optional_text, required_text
from services.reference_validator import ReferenceValidator
from services.store import RecordStore
from services.tenancy import TenantResolver, load_in_school


logger = logging.getLogger(__name__)

# Nombres sugeridos para el formulario; la condición en sí es texto libre
CONDITION_SUGGESTIONS = [
    {"id": "sug_tdah", "name": "TDAH"},
    {"id": "sug_tea", "name": "TEA (Autismo)"},
    {"id": "sug_dislexia", "name": "Dislexia"},
    {"id": "sug_ansiedad", "name": "Trastorno de Ansiedad"},
    {"id": "sug_depresion", "name": "Depresión"},
]


class StudentRecordsService:
    """
    Todo lo que cuelga de un alumno: evaluaciones, notas bimestrales,
    observaciones y condiciones. Las escrituras de evaluaciones y notas van por
    el UpsertCoordinator.
    """

    @staticmethod
    def _student_for_read(claims, entity_type, student_id, requested_school_id) -> Student:
        AccessGuard.require(claims, entity_type, Operation.LIST)
        school_id = TenantResolver.for_read(claims, requested_school_id)
        return load_in_school(Student, student_id, school_id, "alumno")

    # -------------------------
    # EVALUACIONES
    # -------------------------

    @staticmethod
    def list_evaluations(claims, student_id, requested_school_id=None) -> list:
        student = StudentRecordsService._student_for_read(
            claims, EntityType.EVALUATION, student_id, requested_school_id
        )
        return RecordStore.find_many(Evaluation, order_by=Evaluation.evaluated_at, student_id=student.id)

    @staticmethod
    def delete_evaluation(claims, evaluation_id, requested_school_id=None) -> None:
        AccessGuard.require(claims, EntityType.EVALUATION, Operation.DELETE)
        school_id = TenantResolver.for_write(claims, requested_school_id)
        evaluation = load_in_school(Evaluation, evaluation_id, school_id, "evaluación")

        with RecordStore.transaction():
            RecordStore.delete(evaluation)

    # -------------------------
    # NOTAS BIMESTRALES
    # -------------------------

    @staticmethod
    def list_grades(claims, student_id, requested_school_id=None) -> list:
        student = StudentRecordsService._student_for_read(
            claims, EntityType.BIMONTHLY_GRADE, student_id, requested_school_id
        )
        grades = RecordStore.find_many(BimonthlyGrade, student_id=student.id)
        return sorted(grades, key=lambda g: (g.subject.name if g.subject else "", g.period))

    @staticmethod
    def delete_grade(claims, student_id, subject_id, period, requested_school_id=None) -> None:
        AccessGuard.require(claims, EntityType.BIMONTHLY_GRADE, Operation.DELETE)
        school_id = TenantResolver.for_write(claims, requested_school_id)
        refs = ReferenceValidator.validate_references(
            EntityType.BIMONTHLY_GRADE,
            school_id,
            {"student_id": student_id, "subject_id": subject_id},
        )

        period = optional_int({"period": period}, "period")
        if period not in (1, 2, 3, 4):
            raise ValidationError("El bimestre debe ser un número entre 1 y 4.", field="period")

        grade = RecordStore.find_one(
            BimonthlyGrade,
            student_id=refs["student_id"].id,
            subject_id=refs["subject_id"].id,
            period=period,
        )
        if grade is None:
            raise NotFoundError("Nota bimestral inexistente.")

        with RecordStore.transaction():
            RecordStore.delete(grade)

    # -------------------------
    # OBSERVACIONES
    # -------------------------

    @staticmethod
    def latest_observation(claims, student_id, requested_school_id=None):
        """Observación más reciente, o None si el alumno no tiene."""
        history = StudentRecordsService.observation_history(claims, student_id, requested_school_id)
        return history[0] if history else None

    @staticmethod
    def observation_history(claims, student_id, requested_school_id=None) -> list:
        student = StudentRecordsService._student_for_read(
            claims, EntityType.OBSERVATION, student_id, requested_school_id
        )
        return (
            Observation.query.filter_by(student_id=student.id)
            .order_by(Observation.created_at.desc(), Observation.id.desc())
            .all()
        )

    @staticmethod
    def create_observation(claims, payload, requested_school_id=None) -> Observation:
        school_id = TenantResolver.for_write(claims, requested_school_id)

        teacher_id = payload.get("teacher_id")
        if teacher_id in (None, "") and not claims.is_admin:
            teacher_id = claims.actor_id

        refs = ReferenceValidator.validate_references(
            EntityType.OBSERVATION,
            school_id,
            {"student_id": payload.get("student_id"), "teacher_id": teacher_id},
        )
        # el Professor solo firma observaciones a su nombre
        AccessGuard.require(
            claims, EntityType.OBSERVATION, Operation.CREATE, owner_id=refs["teacher_id"].id
        )
        text = required_text(payload, "text", "El texto de la observación es obligatorio.")

        with RecordStore.transaction():
            observation = RecordStore.create(
                Observation,
                student_id=refs["student_id"].id,
                teacher_id=refs["teacher_id"].id,
                text=text,
            )
        return observation

    # -------------------------
    # CONDICIONES
    # -------------------------

    @staticmethod
    def condition_suggestions(claims) -> list:
        AccessGuard.require(claims, EntityType.CONDITION, Operation.LIST)
        return list(CONDITION_SUGGESTIONS)

    @staticmethod
    def list_conditions(claims, student_id, requested_school_id=None) -> list:
        student = StudentRecordsService._student_for_read(
            claims, EntityType.CONDITION, student_id, requested_school_id
        )
        return RecordStore.find_many(
            StudentCondition, order_by=StudentCondition.created_at, student_id=student.id
        )

    @staticmethod
    def create_condition(claims, payload, requested_school_id=None) -> StudentCondition:
        AccessGuard.require(claims, EntityType.CONDITION, Operation.CREATE)
        school_id = TenantResolver.for_write(claims, requested_school_id)

        refs = ReferenceValidator.validate_references(
            EntityType.CONDITION, school_id, {"student_id": payload.get("student_id")}
        )
        student = refs["student_id"]
        name = required_text(payload, "name", "El nombre de la condición es obligatorio.")
        proof_status = required_text(
            payload, "proof_status", "El estado de comprobación es obligatorio."
        )

        if RecordStore.find_one(StudentCondition, student_id=student.id, name=name):
            raise ConflictError(f"La condición '{name}' ya fue registrada para este alumno.")

        with RecordStore.transaction():
            condition = RecordStore.create(
                StudentCondition,
                student_id=student.id,
                name=name,
                proof_status=proof_status,
                description=optional_text(payload, "description"),
            )
        logger.info("Condición %s asignada al alumno %s por %s", name, student.id, claims.actor_id)
        return condition

    @staticmethod
    def delete_condition(claims, condition_id, requested_school_id=None) -> None:
        AccessGuard.require(claims, EntityType.CONDITION, Operation.DELETE)
        school_id = TenantResolver.for_write(claims, requested_school_id)
        condition = load_in_school(StudentCondition, condition_id, school_id, "condición")

        with RecordStore.transaction():
            RecordStore.delete(condition)
        logger.info("Condición %s borrada por %s", condition_id, claims.actor_id)

    # -------------------------
    # FOTO COMPLETA DEL ALUMNO
    # -------------------------

    @staticmethod
    def full_data(claims, student_id, requested_school_id=None) -> dict:
        """
        Alumno con turma, condiciones, evaluaciones, notas, observaciones e
        insights. Es lo que consume la ficha del alumno y lo que se le pasa a
        la IA.
        """
        AccessGuard.require(claims, EntityType.STUDENT, Operation.READ)
        school_id = TenantResolver.for_read(claims, requested_school_id)
        student = load_in_school(Student, student_id, school_id, "alumno")

        evaluations = (
            Evaluation.query.join(Activity, Evaluation.activity_id == Activity.id)
            .filter(Evaluation.student_id == student.id)
            .order_by(Evaluation.evaluated_at)
            .all()
        )
        grades = sorted(
            RecordStore.find_many(BimonthlyGrade, student_id=student.id),
            key=lambda g: (g.subject.name if g.subject else "", g.period),
        )

        return {
            "student": student,
            "school_class": student.school_class,
            "conditions": RecordStore.find_many(
                StudentCondition, order_by=StudentCondition.created_at, student_id=student.id
            ),
            "evaluations": evaluations,
            "grades": grades,
            "observations": RecordStore.find_many(
                Observation, order_by=Observation.created_at, student_id=student.id
            ),
            "insights": RecordStore.find_many(
                Insight, order_by=Insight.created_at.desc(), student_id=student.id
            ),
        }

