from __future__ import annotations

import json
import logging

from models import Insight
from services.access_guard import AccessGuard, EntityType, Operation
from services.ai_client import AIClientError
from services.errors import InternalError
from services.store import RecordStore
from services.student_records_service import StudentRecordsService
from services.tenancy import TenantResolver


logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "Resumí fortalezas, alertas y próximos pasos para el alumno."


class InsightService:
    """
    Análisis de desempeño generados por IA. El insight se guarda solo si el
    proveedor respondió; la llamada a la IA se hace sin transacción abierta.
    """

    @staticmethod
    def list_insights(claims, student_id, requested_school_id=None) -> list:
        AccessGuard.require(claims, EntityType.INSIGHT, Operation.LIST)
        bundle = StudentRecordsService.full_data(claims, student_id, requested_school_id)
        return bundle["insights"]

    @staticmethod
    def build_snapshot(bundle: dict) -> dict:
        """Foto de datos que ve el modelo (y que se guarda junto al texto)."""
        student = bundle["student"]
        school_class = bundle["school_class"]
        return {
            "student": {
                "name": student.name,
                "registration_number": student.registration_number,
                "age": student.age,
                "class": school_class.name if school_class else None,
                "conditions": [
                    {
                        "name": c.name,
                        "proof_status": c.proof_status,
                        "description": c.description,
                    }
                    for c in bundle["conditions"]
                ],
            },
            "grades": [
                {
                    "subject": g.subject.name if g.subject else None,
                    "period": g.period,
                    "score": g.score,
                    "remediation_score": g.remediation_score,
                }
                for g in bundle["grades"]
            ],
            "evaluations": [
                {
                    "activity": e.activity.kind if e.activity else None,
                    "subject": e.activity.subject.name if e.activity and e.activity.subject else None,
                    "score": e.score,
                    "max_score": e.activity.max_score if e.activity else None,
                    "on_time": e.on_time,
                    "narrative": e.narrative,
                }
                for e in bundle["evaluations"]
            ],
            "observations": [o.text for o in bundle["observations"]],
        }

    @staticmethod
    def build_prompt(user_prompt: str, snapshot: dict) -> str:
        return (
            f"Análisis de desempeño del alumno: {user_prompt}\n\n"
            f"Datos del alumno:\n{json.dumps(snapshot, ensure_ascii=False, indent=2)}"
        )

    @staticmethod
    def generate(claims, student_id, user_prompt, client, requested_school_id=None) -> Insight:
        AccessGuard.require(claims, EntityType.INSIGHT, Operation.CREATE)
        school_id = TenantResolver.for_write(claims, requested_school_id)
        bundle = StudentRecordsService.full_data(claims, student_id, school_id)
        student = bundle["student"]

        snapshot = InsightService.build_snapshot(bundle)
        prompt = InsightService.build_prompt((user_prompt or "").strip() or DEFAULT_PROMPT, snapshot)

        try:
            result = client.generate(prompt, snapshot)
        except AIClientError as exc:
            logger.exception("Fallo del proveedor de IA para el alumno %s", student.id)
            raise InternalError("Error interno al generar el insight.") from exc

        with RecordStore.transaction():
            insight = RecordStore.create(
                Insight,
                student_id=student.id,
                input_snapshot=snapshot,
                prompt=prompt,
                text=result["text"],
                ai_model=result.get("model"),
            )

        logger.info(
            "Insight %s generado para el alumno %s (%s)",
            insight.id,
            student.id,
            result.get("provider"),
        )
        return insight
