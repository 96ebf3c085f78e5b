from flask import current_app, jsonify
from flask_login import login_required

from api.utils.permissions import current_claims, request_payload, requested_school_id
from services.ai_client import AIClient, AIClientError
from services.errors import InternalError
from services.insight_service import InsightService
from . import api_bp


def _ai_client() -> AIClient:
    try:
        return AIClient(current_app.config)
    except AIClientError as exc:
        raise InternalError("El proveedor de IA no está configurado.") from exc


@api_bp.get("/insights/student/<int:student_id>")
@login_required
def list_student_insights(student_id):
    insights = InsightService.list_insights(current_claims(), student_id, requested_school_id())
    return jsonify([i.as_dict() for i in insights])


@api_bp.post("/insights/student/<int:student_id>")
@login_required
def generate_student_insight(student_id):
    data = request_payload()
    insight = InsightService.generate(
        current_claims(),
        student_id,
        data.get("prompt"),
        _ai_client(),
        requested_school_id(data),
    )
    return jsonify({"message": "Insight generado.", "insight": insight.as_dict()}), 201
