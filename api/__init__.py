from flask import Blueprint, current_app, jsonify

from services.errors import InternalError, RecordError

api_bp = Blueprint("api", __name__, url_prefix="/api")


@api_bp.app_errorhandler(RecordError)
def handle_record_error(exc: RecordError):
    if isinstance(exc, InternalError):
        current_app.logger.exception("Error interno: %s", exc.message)
    else:
        current_app.logger.info("%s (%s): %s", exc.kind, exc.status_code, exc.message)
    return jsonify({"error": exc.message}), exc.status_code


from . import (
    roles,
    schools,
    teachers,
    classes,
    subjects,
    students,
    activities,
    evaluations,
    grades,
    observations,
    conditions,
    insights,
)
