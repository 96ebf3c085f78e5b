from flask import jsonify
from flask_login import login_required

from api.utils.permissions import current_claims, request_payload, requested_school_id
from api.utils.serializers import class_json
from services.roster_service import RosterService
from . import api_bp


@api_bp.get("/classes")
@login_required
def list_classes():
    classes = RosterService.list_classes(current_claims(), requested_school_id())
    return jsonify([class_json(c) for c in classes])


@api_bp.post("/classes")
@login_required
def create_class():
    data = request_payload()
    school_class = RosterService.create_class(current_claims(), data, requested_school_id(data))
    return jsonify({"message": "Turma registrada.", "class": class_json(school_class)}), 201


@api_bp.put("/classes/<int:class_id>")
@login_required
def update_class(class_id):
    data = request_payload()
    school_class = RosterService.update_class(current_claims(), class_id, data, requested_school_id(data))
    return jsonify({"message": "Turma actualizada.", "class": class_json(school_class)})


@api_bp.delete("/classes/<int:class_id>")
@login_required
def delete_class(class_id):
    RosterService.delete_class(current_claims(), class_id, requested_school_id())
    return jsonify({"message": "Turma borrada."})
