from flask import jsonify
from flask_login import login_required

from api.utils.permissions import current_claims, request_payload, requested_school_id
from api.utils.serializers import teacher_json
from services.staff_service import StaffService
from . import api_bp


@api_bp.get("/teachers")
@login_required
def list_teachers():
    teachers = StaffService.list_teachers(current_claims(), requested_school_id())
    return jsonify([teacher_json(t) for t in teachers])


@api_bp.post("/teachers")
@login_required
def create_teacher():
    data = request_payload()
    teacher = StaffService.create_teacher(current_claims(), data, requested_school_id(data))
    return jsonify({"message": "Docente registrado.", "teacher": teacher_json(teacher)}), 201


@api_bp.put("/teachers/<int:teacher_id>")
@login_required
def update_teacher(teacher_id):
    data = request_payload()
    teacher = StaffService.update_teacher(current_claims(), teacher_id, data, requested_school_id(data))
    return jsonify({"message": "Docente actualizado.", "teacher": teacher_json(teacher)})


@api_bp.delete("/teachers/<int:teacher_id>")
@login_required
def delete_teacher(teacher_id):
    StaffService.delete_teacher(current_claims(), teacher_id, requested_school_id())
    return jsonify({"message": "Docente borrado."})
