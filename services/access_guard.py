from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from models import RoleEnum
from services.errors import ForbiddenError


logger = logging.getLogger(__name__)


class EntityType(enum.Enum):
    SCHOOL = "school"
    TEACHER = "teacher"
    SCHOOL_CLASS = "school_class"
    SUBJECT = "subject"
    STUDENT = "student"
    ACTIVITY = "activity"
    EVALUATION = "evaluation"
    BIMONTHLY_GRADE = "bimonthly_grade"
    OBSERVATION = "observation"
    CONDITION = "condition"
    INSIGHT = "insight"
    ROLE = "role"


class Operation(enum.Enum):
    LIST = "list"
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class Permission(enum.Enum):
    ALLOW = "allow"
    DENY = "deny"
    # Permitido solo si el docente dueño del registro es el propio actor
    OWN = "own"


_READS = (Operation.LIST, Operation.READ)
_WRITES = (Operation.CREATE, Operation.UPDATE, Operation.DELETE)


def _row(default: Permission, **overrides: Permission) -> dict:
    row = {op: default for op in Operation}
    for op_name, permission in overrides.items():
        row[Operation[op_name.upper()]] = permission
    return row


def _admin_table() -> dict:
    return {entity: _row(Permission.ALLOW) for entity in EntityType}


def _supervisor_table() -> dict:
    table = {entity: _row(Permission.ALLOW) for entity in EntityType}
    table[EntityType.SCHOOL] = _row(
        Permission.DENY, list=Permission.ALLOW, read=Permission.ALLOW
    )
    return table


def _profesor_table() -> dict:
    table = {
        entity: _row(Permission.DENY, list=Permission.ALLOW, read=Permission.ALLOW)
        for entity in EntityType
    }
    table[EntityType.ACTIVITY][Operation.CREATE] = Permission.OWN
    table[EntityType.ACTIVITY][Operation.UPDATE] = Permission.OWN
    table[EntityType.EVALUATION][Operation.CREATE] = Permission.OWN
    table[EntityType.EVALUATION][Operation.UPDATE] = Permission.OWN
    table[EntityType.OBSERVATION][Operation.CREATE] = Permission.OWN
    table[EntityType.INSIGHT][Operation.CREATE] = Permission.ALLOW
    return table


PERMISSIONS = {
    RoleEnum.ADMIN: _admin_table(),
    RoleEnum.SUPERVISOR: _supervisor_table(),
    RoleEnum.PROFESOR: _profesor_table(),
}


def _verify_exhaustive(table: dict) -> None:
    for role in RoleEnum:
        if role not in table:
            raise RuntimeError(f"Falta el rol {role.name} en la tabla de permisos.")
        for entity in EntityType:
            row = table[role].get(entity)
            if row is None:
                raise RuntimeError(f"Falta {entity.name} para el rol {role.name}.")
            missing = [op.name for op in Operation if op not in row]
            if missing:
                raise RuntimeError(
                    f"Faltan operaciones {missing} en {role.name}/{entity.name}."
                )


_verify_exhaustive(PERMISSIONS)


@dataclass(frozen=True)
class Decision:
    allowed: bool
    permission: Permission
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


class AccessGuard:
    """
    Tabla rol × tipo de entidad × operación. La escuela ya la decidió el
    TenantResolver; acá solo se mira qué puede hacer cada rol.
    """

    @staticmethod
    def check_permission(
        role: RoleEnum,
        entity_type: EntityType,
        operation: Operation,
        *,
        actor_id: Optional[int] = None,
        owner_id: Optional[int] = None,
    ) -> Decision:
        permission = PERMISSIONS[role][entity_type][operation]

        if permission == Permission.ALLOW:
            return Decision(True, permission)
        if permission == Permission.OWN:
            if actor_id is not None and owner_id is not None and actor_id == owner_id:
                return Decision(True, permission)
            return Decision(False, permission, "Solo el docente responsable puede hacer esto.")
        return Decision(False, permission, "Acceso negado para tu nivel de acceso.")

    @staticmethod
    def require(
        claims,
        entity_type: EntityType,
        operation: Operation,
        *,
        owner_id: Optional[int] = None,
    ) -> Decision:
        decision = AccessGuard.check_permission(
            claims.role,
            entity_type,
            operation,
            actor_id=claims.actor_id,
            owner_id=owner_id,
        )
        if not decision.allowed:
            logger.warning(
                "Permiso denegado: actor %s (%s) %s %s",
                claims.actor_id,
                claims.role.name,
                operation.value,
                entity_type.value,
            )
            raise ForbiddenError(decision.reason)
        return decision

    @staticmethod
    def require_can_manage_role(claims, target_role: RoleEnum, current_role: Optional[RoleEnum] = None) -> None:
        """
        Solo un Administrador crea, promueve o edita cuentas de Administrador.
        """
        touches_admin = target_role == RoleEnum.ADMIN or current_role == RoleEnum.ADMIN
        if touches_admin and not claims.is_admin:
            logger.warning(
                "Actor %s intentó gestionar una cuenta de Administrador", claims.actor_id
            )
            raise ForbiddenError("Solo un Administrador puede gestionar cuentas de Administrador.")
