# api/utils/permissions.py

from flask import request
from flask_login import current_user

from services.errors import ForbiddenError
from services.tenancy import Claims, TenantResolver


def current_claims() -> Claims:
    """
    Claims del docente autenticado (cargado por el request_loader a partir
    del token Bearer).
    """
    return Claims.from_teacher(current_user)


def request_payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def requested_school_id(payload: dict | None = None):
    """
    Escuela que el cliente dice estar visualizando: `viewingSchoolId` en la
    query y/o `school_id` en el body. Si vienen los dos y no coinciden, 403.
    La decisión final la toma siempre el TenantResolver.
    """
    from_query = TenantResolver.normalize_school_id(request.args.get("viewingSchoolId"))
    from_body = None
    if payload:
        from_body = TenantResolver.normalize_school_id(payload.get("school_id"))

    if from_query is not None and from_body is not None and from_query != from_body:
        raise ForbiddenError("La escuela del cuerpo no coincide con la escuela visualizada.")

    return from_query if from_query is not None else from_body
