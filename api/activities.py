from flask import jsonify
from flask_login import login_required

from api.utils.permissions import current_claims, request_payload, requested_school_id
from api.utils.serializers import activity_json
from services.activity_service import ActivityService
from . import api_bp


@api_bp.get("/activities")
@login_required
def list_activities():
    activities = ActivityService.list_activities(current_claims(), requested_school_id())
    return jsonify([activity_json(a) for a in activities])


@api_bp.post("/activities")
@login_required
def create_activity():
    data = request_payload()
    activity = ActivityService.create_activity(current_claims(), data, requested_school_id(data))
    return jsonify({"message": "Actividad registrada.", "activity": activity_json(activity)}), 201


@api_bp.put("/activities/<int:activity_id>")
@login_required
def update_activity(activity_id):
    data = request_payload()
    activity = ActivityService.update_activity(
        current_claims(), activity_id, data, requested_school_id(data)
    )
    return jsonify({"message": "Actividad actualizada.", "activity": activity_json(activity)})


@api_bp.delete("/activities/<int:activity_id>")
@login_required
def delete_activity(activity_id):
    summary = ActivityService.delete_activity(current_claims(), activity_id, requested_school_id())
    return jsonify({"message": "Actividad borrada.", "deleted": summary})
