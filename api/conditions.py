from flask import jsonify
from flask_login import login_required

from api.utils.permissions import current_claims, request_payload, requested_school_id
from api.utils.serializers import condition_json
from services.student_records_service import StudentRecordsService
from . import api_bp


@api_bp.get("/conditions")
@login_required
def condition_suggestions():
    return jsonify(StudentRecordsService.condition_suggestions(current_claims()))


@api_bp.get("/conditions/student/<int:student_id>")
@login_required
def list_student_conditions(student_id):
    conditions = StudentRecordsService.list_conditions(
        current_claims(), student_id, requested_school_id()
    )
    return jsonify([condition_json(c) for c in conditions])


@api_bp.post("/conditions")
@login_required
def create_condition():
    data = request_payload()
    condition = StudentRecordsService.create_condition(current_claims(), data, requested_school_id(data))
    return jsonify({"message": "Condición registrada.", "condition": condition_json(condition)}), 201


@api_bp.delete("/conditions/<int:condition_id>")
@login_required
def delete_condition(condition_id):
    StudentRecordsService.delete_condition(current_claims(), condition_id, requested_school_id())
    return jsonify({"message": "Condición borrada."})
