from flask import jsonify
from flask_login import login_required

from api.utils.permissions import current_claims, request_payload, requested_school_id
from api.utils.serializers import subject_json
from services.roster_service import RosterService
from . import api_bp


@api_bp.get("/subjects")
@login_required
def list_subjects():
    subjects = RosterService.list_subjects(current_claims(), requested_school_id())
    return jsonify([subject_json(s) for s in subjects])


@api_bp.post("/subjects")
@login_required
def create_subject():
    data = request_payload()
    subject = RosterService.create_subject(current_claims(), data, requested_school_id(data))
    return jsonify({"message": "Materia registrada.", "subject": subject_json(subject)}), 201


@api_bp.put("/subjects/<int:subject_id>")
@login_required
def update_subject(subject_id):
    data = request_payload()
    subject = RosterService.update_subject(current_claims(), subject_id, data, requested_school_id(data))
    return jsonify({"message": "Materia actualizada.", "subject": subject_json(subject)})


@api_bp.delete("/subjects/<int:subject_id>")
@login_required
def delete_subject(subject_id):
    RosterService.delete_subject(current_claims(), subject_id, requested_school_id())
    return jsonify({"message": "Materia borrada."})
