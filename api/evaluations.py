from flask import jsonify
from flask_login import login_required

from api.utils.permissions import current_claims, request_payload, requested_school_id
from api.utils.serializers import evaluation_json
from services.student_records_service import StudentRecordsService
from services.upsert_coordinator import UpsertCoordinator
from . import api_bp


@api_bp.get("/evaluations/student/<int:student_id>")
@login_required
def list_student_evaluations(student_id):
    evaluations = StudentRecordsService.list_evaluations(
        current_claims(), student_id, requested_school_id()
    )
    return jsonify([evaluation_json(e) for e in evaluations])


@api_bp.post("/evaluations")
@login_required
def save_evaluation():
    data = request_payload()
    evaluation = UpsertCoordinator.upsert_evaluation(current_claims(), data, requested_school_id(data))
    return jsonify({"message": "Evaluación guardada.", "evaluation": evaluation_json(evaluation)}), 201


@api_bp.delete("/evaluations/<int:evaluation_id>")
@login_required
def delete_evaluation(evaluation_id):
    StudentRecordsService.delete_evaluation(current_claims(), evaluation_id, requested_school_id())
    return jsonify({"message": "Evaluación borrada."})
