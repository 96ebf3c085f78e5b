from flask import jsonify, request
from flask_login import login_required

from api.utils.permissions import current_claims, request_payload, requested_school_id
from api.utils.serializers import full_data_json, student_json
from services.roster_service import RosterService
from services.student_records_service import StudentRecordsService
from . import api_bp


@api_bp.get("/students")
@login_required
def list_students():
    students = RosterService.list_students(
        current_claims(), requested_school_id(), class_id=request.args.get("class_id")
    )
    return jsonify([student_json(s) for s in students])


@api_bp.post("/students")
@login_required
def create_student():
    data = request_payload()
    student = RosterService.create_student(current_claims(), data, requested_school_id(data))
    return jsonify({"message": "Alumno registrado.", "student": student_json(student)}), 201


@api_bp.get("/students/<int:student_id>")
@login_required
def get_student(student_id):
    student = RosterService.get_student(current_claims(), student_id, requested_school_id())
    return jsonify(student_json(student))


@api_bp.get("/students/<int:student_id>/full-data")
@login_required
def student_full_data(student_id):
    bundle = StudentRecordsService.full_data(current_claims(), student_id, requested_school_id())
    return jsonify(full_data_json(bundle))


@api_bp.put("/students/<int:student_id>")
@login_required
def update_student(student_id):
    data = request_payload()
    student = RosterService.update_student(current_claims(), student_id, data, requested_school_id(data))
    return jsonify({"message": "Alumno actualizado.", "student": student_json(student)})


@api_bp.delete("/students/<int:student_id>")
@login_required
def delete_student(student_id):
    summary = RosterService.delete_student(current_claims(), student_id, requested_school_id())
    return jsonify({"message": "Alumno borrado.", "deleted": summary})
