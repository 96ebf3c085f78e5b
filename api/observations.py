from flask import jsonify
from flask_login import login_required

from api.utils.permissions import current_claims, request_payload, requested_school_id
from api.utils.serializers import observation_json
from services.student_records_service import StudentRecordsService
from . import api_bp


@api_bp.get("/observations/student/<int:student_id>")
@login_required
def latest_observation(student_id):
    observation = StudentRecordsService.latest_observation(
        current_claims(), student_id, requested_school_id()
    )
    return jsonify(observation_json(observation))


@api_bp.get("/observations/student/<int:student_id>/history")
@login_required
def observation_history(student_id):
    history = StudentRecordsService.observation_history(
        current_claims(), student_id, requested_school_id()
    )
    return jsonify([observation_json(o) for o in history])


@api_bp.post("/observations")
@login_required
def create_observation():
    data = request_payload()
    observation = StudentRecordsService.create_observation(
        current_claims(), data, requested_school_id(data)
    )
    return jsonify({"message": "Observación guardada.", "observation": observation_json(observation)}), 201
