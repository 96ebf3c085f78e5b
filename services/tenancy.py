from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Union

from models import RoleEnum
from services.errors import ForbiddenError, ValidationError
from services.store import RecordStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Claims:
    """Lo que sabemos del actor autenticado en cada request."""

    actor_id: int
    role: RoleEnum
    school_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == RoleEnum.ADMIN

    @classmethod
    def from_teacher(cls, teacher) -> "Claims":
        return cls(actor_id=teacher.id, role=teacher.role, school_id=teacher.school_id)


@dataclass(frozen=True)
class OperatingTenant:
    school_id: int


class NoAccessReason(enum.Enum):
    # Administrador sin escuela seleccionada: listas vacías, escrituras rechazadas
    VIEWING_SCHOOL_REQUIRED = "viewing_school_required"
    # Supervisor/Professor sin escuela asociada: siempre 403
    NO_HOME_SCHOOL = "no_home_school"


@dataclass(frozen=True)
class NoAccess:
    reason: NoAccessReason

    @property
    def allows_empty_listing(self) -> bool:
        return self.reason == NoAccessReason.VIEWING_SCHOOL_REQUIRED

    @property
    def message(self) -> str:
        if self.reason == NoAccessReason.VIEWING_SCHOOL_REQUIRED:
            return "Seleccioná una escuela para operar."
        return "Usuario no asociado a una escuela."


Resolution = Union[OperatingTenant, NoAccess]


class TenantResolver:
    """
    Decide contra qué escuela opera cada request.

    - Administrador: la escuela que está visualizando (viewingSchoolId), si la hay.
    - Supervisor / Professor: siempre su propia escuela. El valor pedido por el
      cliente se ignora, pero en escrituras tiene que coincidir o se rechaza.
    """

    @staticmethod
    def normalize_school_id(raw) -> Optional[int]:
        if raw is None or isinstance(raw, bool):
            return None
        if isinstance(raw, int):
            return raw
        text = str(raw).strip()
        if not text or text.lower() in {"null", "none", "undefined"}:
            return None
        try:
            return int(text)
        except ValueError as exc:
            raise ValidationError("El ID de la escuela debe ser numérico.", field="school_id") from exc

    @staticmethod
    def resolve(claims: Claims, requested_school_id=None) -> Resolution:
        requested = TenantResolver.normalize_school_id(requested_school_id)

        if claims.is_admin:
            if requested is None:
                return NoAccess(NoAccessReason.VIEWING_SCHOOL_REQUIRED)
            return OperatingTenant(requested)

        if claims.school_id is None:
            return NoAccess(NoAccessReason.NO_HOME_SCHOOL)
        return OperatingTenant(claims.school_id)

    @staticmethod
    def for_listing(claims: Claims, requested_school_id=None) -> Optional[int]:
        """
        Escuela para listados. None significa "devolver lista vacía"
        (Administrador sin escuela seleccionada).
        """
        resolution = TenantResolver.resolve(claims, requested_school_id)
        if isinstance(resolution, OperatingTenant):
            return resolution.school_id
        if resolution.allows_empty_listing:
            return None
        raise ForbiddenError(resolution.message)

    @staticmethod
    def for_read(claims: Claims, requested_school_id=None) -> int:
        resolution = TenantResolver.resolve(claims, requested_school_id)
        if isinstance(resolution, NoAccess):
            raise ForbiddenError(resolution.message)
        return resolution.school_id

    @staticmethod
    def for_write(claims: Claims, requested_school_id=None) -> int:
        resolution = TenantResolver.resolve(claims, requested_school_id)
        if isinstance(resolution, NoAccess):
            raise ForbiddenError(resolution.message)

        if not claims.is_admin:
            requested = TenantResolver.normalize_school_id(requested_school_id)
            if requested is not None and requested != resolution.school_id:
                logger.warning(
                    "Escritura rechazada: actor %s (escuela %s) pidió operar en la escuela %s",
                    claims.actor_id,
                    claims.school_id,
                    requested,
                )
                raise ForbiddenError("Acceso negado: no podés operar sobre otra escuela.")

        return resolution.school_id

    @staticmethod
    def ensure_same_school(record, school_id: int, label: str) -> None:
        """
        El registro existe (ya se validó) pero tiene que pertenecer a la escuela
        de operación; si no, 403.
        """
        if record.owning_school_id != school_id:
            logger.warning(
                "%s %s pertenece a la escuela %s, no a %s",
                label,
                getattr(record, "id", None),
                record.owning_school_id,
                school_id,
            )
            raise ForbiddenError(f"Acceso negado: {label} de otra escuela.")


def load_in_school(model, record_id, school_id: int, label: str):
    """Busca el registro (404 si no existe) y exige que sea de la escuela de operación (403)."""
    record = RecordStore.require(model, record_id, label.capitalize())
    TenantResolver.ensure_same_school(record, school_id, label)
    return record
