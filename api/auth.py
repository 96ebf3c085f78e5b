# api/auth.py

from flask import Blueprint, current_app, jsonify

from api.utils.permissions import request_payload
from services.staff_service import StaffService
from services.tokens import create_access_token

auth_bp = Blueprint("auth", __name__)


# ----------------------------------------------
# POST: LOGIN (matrícula + contraseña -> token)
# ----------------------------------------------
@auth_bp.post("/login")
def login():
    data = request_payload()
    registration = (data.get("registration") or "").strip()
    password = data.get("password") or ""

    teacher = StaffService.authenticate(registration, password)
    if not teacher:
        return jsonify({"error": "Credenciales inválidas."}), 401

    token = create_access_token(teacher, current_app.config)
    return jsonify({
        "message": "Login realizado con éxito.",
        "token": token,
        "user": {
            "id": teacher.id,
            "name": teacher.name,
            "role": teacher.role.value,
            "school_id": teacher.school_id,
            "school_name": teacher.school.name if teacher.school else "Sin escuela",
        },
    })
