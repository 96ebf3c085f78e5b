from __future__ import annotations

import logging
from dataclasses import dataclass, field

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
from services.store import RecordStore
from services.tenancy import TenantResolver, load_in_school


logger = logging.getLogger(__name__)


@dataclass
class DeletionPlan:
    """Filas a borrar, en orden: dependientes primero, la raíz al final."""

    root: object
    steps: list = field(default_factory=list)

    def add(self, label: str, rows) -> None:
        self.steps.append((label, list(rows)))

    @property
    def summary(self) -> dict:
        return {label: len(rows) for label, rows in self.steps}


class CascadeDeleter:
    """
    Borrado manual de agregados (Alumno, Actividad). Primero se arma el plan
    completo y después se ejecuta dentro de una sola transacción: si falla
    cualquier paso no queda nada borrado.

    Borrar una Actividad no toca las notas bimestrales de su materia.
    """

    @staticmethod
    def plan_student(student: Student) -> DeletionPlan:
        plan = DeletionPlan(root=student)
        plan.add("conditions", RecordStore.find_many(StudentCondition, student_id=student.id))
        plan.add("evaluations", RecordStore.find_many(Evaluation, student_id=student.id))
        plan.add("observations", RecordStore.find_many(Observation, student_id=student.id))
        plan.add("bimonthly_grades", RecordStore.find_many(BimonthlyGrade, student_id=student.id))
        plan.add("insights", RecordStore.find_many(Insight, student_id=student.id))
        return plan

    @staticmethod
    def plan_activity(activity: Activity) -> DeletionPlan:
        plan = DeletionPlan(root=activity)
        plan.add("evaluations", RecordStore.find_many(Evaluation, activity_id=activity.id))
        return plan

    @staticmethod
    def execute(plan: DeletionPlan) -> dict:
        with RecordStore.transaction():
            for _label, rows in plan.steps:
                if rows:
                    RecordStore.delete_rows(rows)
            RecordStore.delete(plan.root)
        return plan.summary

    @staticmethod
    def delete_student(claims, student_id, requested_school_id=None) -> dict:
        AccessGuard.require(claims, EntityType.STUDENT, Operation.DELETE)
        school_id = TenantResolver.for_write(claims, requested_school_id)

        student = load_in_school(Student, student_id, school_id, "alumno")

        plan = CascadeDeleter.plan_student(student)
        summary = CascadeDeleter.execute(plan)
        logger.info("Alumno %s borrado por %s: %s", student_id, claims.actor_id, summary)
        return summary

    @staticmethod
    def delete_activity(claims, activity_id, requested_school_id=None) -> dict:
        AccessGuard.require(claims, EntityType.ACTIVITY, Operation.DELETE)
        school_id = TenantResolver.for_write(claims, requested_school_id)

        activity = load_in_school(Activity, activity_id, school_id, "actividad")

        plan = CascadeDeleter.plan_activity(activity)
        summary = CascadeDeleter.execute(plan)
        logger.info("Actividad %s borrada por %s: %s", activity_id, claims.actor_id, summary)
        return summary
