from flask import jsonify
from flask_login import login_required

from api.utils.permissions import current_claims
from api.utils.serializers import role_json
from services.staff_service import StaffService
from . import api_bp


@api_bp.get("/roles")
@login_required
def list_roles():
    roles = StaffService.list_roles(current_claims())
    return jsonify([role_json(role) for role in roles])
