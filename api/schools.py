from flask import jsonify
from flask_login import login_required

from api.utils.permissions import current_claims, request_payload
from api.utils.serializers import school_json
from services.school_service import SchoolService
from . import api_bp


@api_bp.get("/schools")
@login_required
def list_schools():
    schools = SchoolService.list_schools(current_claims())
    return jsonify([school_json(s) for s in schools])


@api_bp.post("/schools")
@login_required
def create_school():
    school = SchoolService.create_school(current_claims(), request_payload())
    return jsonify({"message": "Escuela registrada.", "school": school_json(school)}), 201


@api_bp.get("/schools/<int:school_id>")
@login_required
def get_school(school_id):
    school = SchoolService.get_school(current_claims(), school_id)
    return jsonify(school_json(school))


@api_bp.put("/schools/<int:school_id>")
@login_required
def update_school(school_id):
    school = SchoolService.update_school(current_claims(), school_id, request_payload())
    return jsonify({"message": "Escuela actualizada.", "school": school_json(school)})


@api_bp.delete("/schools/<int:school_id>")
@login_required
def delete_school(school_id):
    SchoolService.delete_school(current_claims(), school_id)
    return jsonify({"message": "Escuela borrada."})
