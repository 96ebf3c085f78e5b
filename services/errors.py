from __future__ import annotations


class RecordError(Exception):
    """
    Base de los errores que devuelve el motor de registros.
    Cada subclase fija el status HTTP con el que la expone la API.
    """

    status_code = 500
    kind = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RecordError, ValueError):
    """Campos faltantes o mal formados, nota por encima del máximo, etc."""

    status_code = 400
    kind = "validation_error"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class ForbiddenError(RecordError, PermissionError):
    status_code = 403
    kind = "forbidden"


class TenantMismatchError(ForbiddenError):
    """La referencia existe, pero pertenece a otra escuela."""

    def __init__(self, ref_name: str, message: str | None = None):
        super().__init__(message or f"'{ref_name}' no pertenece a la escuela de operación.")
        self.ref_name = ref_name


class NotFoundError(RecordError, LookupError):
    """El registro no existe en ninguna escuela."""

    status_code = 404
    kind = "not_found"


class ConflictError(RecordError):
    """Violación de unicidad (matrícula, par alumno/actividad, condición repetida...)."""

    status_code = 409
    kind = "conflict"


class InternalError(RecordError):
    """Falla del store o de un colaborador externo, ajena al input."""

    status_code = 500
    kind = "internal_error"
