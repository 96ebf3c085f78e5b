from flask import jsonify
from flask_login import login_required

from api.utils.permissions import current_claims, request_payload, requested_school_id
from api.utils.serializers import grade_json
from services.student_records_service import StudentRecordsService
from services.upsert_coordinator import UpsertCoordinator
from . import api_bp


@api_bp.get("/grades/student/<int:student_id>")
@login_required
def list_student_grades(student_id):
    grades = StudentRecordsService.list_grades(current_claims(), student_id, requested_school_id())
    return jsonify([grade_json(g) for g in grades])


@api_bp.post("/grades")
@login_required
def save_grade():
    data = request_payload()
    grade = UpsertCoordinator.upsert_grade(current_claims(), data, requested_school_id(data))
    return jsonify({"message": "Nota guardada.", "grade": grade_json(grade)}), 201


@api_bp.post("/grades/batch")
@login_required
def save_grades_batch():
    """
    Body: {"student_id": 1, "grades": [{"subject_id": 2, "period": 1, "score": 8}, ...]}
    Todo o nada.
    """
    data = request_payload()
    grades = UpsertCoordinator.upsert_grades_batch(
        current_claims(),
        data.get("grades"),
        requested_school_id(data),
        student_id=data.get("student_id"),
    )
    return jsonify({"message": "Notas guardadas.", "grades": [grade_json(g) for g in grades]}), 201


@api_bp.delete("/grades/<int:student_id>/<int:subject_id>/<int:period>")
@login_required
def delete_grade(student_id, subject_id, period):
    StudentRecordsService.delete_grade(
        current_claims(), student_id, subject_id, period, requested_school_id()
    )
    return jsonify({"message": "Nota borrada."})
