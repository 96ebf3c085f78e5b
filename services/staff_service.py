from __future__ import annotations

import logging
from typing import Optional

from models import Activity, Evaluation, Observation, RoleEnum, School, Teacher
from services.access_guard import AccessGuard, EntityType, Operation
from services.errors import ConflictError, ValidationError
from services.payloads import optional_text, required_text
from services.store import RecordStore
from services.tenancy import TenantResolver


logger = logging.getLogger(__name__)


def _parse_role(raw) -> RoleEnum:
    if raw in (None, ""):
        raise ValidationError("El nivel de acceso es obligatorio.", field="role")
    try:
        return RoleEnum.parse(raw)
    except ValueError as exc:
        raise ValidationError(str(exc), field="role") from exc


class StaffService:
    """
    Docentes (Administrador, Supervisor, Professor).

    - Un Administrador puede no tener escuela.
    - Solo un Administrador crea, edita o promueve a otro Administrador.
    - Matrícula y email son únicos en todo el sistema.
    """

    @staticmethod
    def authenticate(registration: str, password: str) -> Optional[Teacher]:
        registration = (registration or "").strip()
        if not registration or not password:
            return None

        teacher = RecordStore.find_one(Teacher, registration=registration)
        if not teacher or not teacher.is_active or not teacher.check_password(password):
            logger.info("Login fallido para la matrícula %s", registration)
            return None
        return teacher

    @staticmethod
    def list_roles(claims) -> list:
        AccessGuard.require(claims, EntityType.ROLE, Operation.LIST)
        return list(RoleEnum)

    @staticmethod
    def list_teachers(claims, requested_school_id=None) -> list:
        AccessGuard.require(claims, EntityType.TEACHER, Operation.LIST)
        school_id = TenantResolver.for_listing(claims, requested_school_id)
        if school_id is None:
            return []
        return RecordStore.find_many(Teacher, order_by=Teacher.name, school_id=school_id)

    @staticmethod
    def _check_unique(registration: Optional[str], email: Optional[str], exclude_id=None) -> None:
        if registration:
            clash = RecordStore.find_one(Teacher, registration=registration)
            if clash and clash.id != exclude_id:
                raise ConflictError("El código de registro o el email ya existe.")
        if email:
            clash = RecordStore.find_one(Teacher, email=email)
            if clash and clash.id != exclude_id:
                raise ConflictError("El código de registro o el email ya existe.")

    @staticmethod
    def _school_for_new_account(claims, role: RoleEnum, requested_school_id) -> Optional[int]:
        # Una cuenta de Administrador puede quedar sin escuela
        if role == RoleEnum.ADMIN:
            school_id = TenantResolver.normalize_school_id(requested_school_id)
            if school_id is not None:
                RecordStore.require(School, school_id, "Escuela")
            return school_id
        school_id = TenantResolver.for_write(claims, requested_school_id)
        RecordStore.require(School, school_id, "Escuela")
        return school_id

    @staticmethod
    def _operating_school_for(claims, teacher: Teacher, requested_school_id) -> None:
        # Cuentas sin escuela (Administradores) solo las toca un Administrador
        if teacher.school_id is None and claims.is_admin:
            return
        school_id = TenantResolver.for_write(claims, requested_school_id)
        TenantResolver.ensure_same_school(teacher, school_id, "docente")

    @staticmethod
    def create_teacher(claims, payload, requested_school_id=None) -> Teacher:
        AccessGuard.require(claims, EntityType.TEACHER, Operation.CREATE)

        name = required_text(payload, "name", "El nombre es obligatorio.")
        registration = required_text(payload, "registration", "El código de registro es obligatorio.")
        password = payload.get("password") or ""
        if not password:
            raise ValidationError("La contraseña es obligatoria.", field="password")
        email = optional_text(payload, "email")
        email = email.lower() if email else None

        role = _parse_role(payload.get("role"))
        AccessGuard.require_can_manage_role(claims, role)
        school_id = StaffService._school_for_new_account(claims, role, requested_school_id)

        StaffService._check_unique(registration, email)

        with RecordStore.transaction():
            teacher = Teacher(
                name=name,
                registration=registration,
                email=email,
                role=role,
                school_id=school_id,
            )
            teacher.set_password(password)
            RecordStore.create_instance(teacher)

        logger.info("Docente %s (%s) creado por %s", teacher.id, role.name, claims.actor_id)
        return teacher

    @staticmethod
    def update_teacher(claims, teacher_id, payload, requested_school_id=None) -> Teacher:
        AccessGuard.require(claims, EntityType.TEACHER, Operation.UPDATE)
        teacher = RecordStore.require(Teacher, teacher_id, "Docente")
        StaffService._operating_school_for(claims, teacher, requested_school_id)

        new_role = _parse_role(payload["role"]) if payload.get("role") not in (None, "") else teacher.role
        AccessGuard.require_can_manage_role(claims, new_role, teacher.role)

        values = {"role": new_role}
        if "name" in payload:
            values["name"] = required_text(payload, "name", "El nombre es obligatorio.")
        if "registration" in payload:
            values["registration"] = required_text(
                payload, "registration", "El código de registro es obligatorio."
            )
        if "email" in payload:
            email = optional_text(payload, "email")
            values["email"] = email.lower() if email else None

        StaffService._check_unique(values.get("registration"), values.get("email"), exclude_id=teacher.id)

        with RecordStore.transaction():
            if payload.get("password"):
                teacher.set_password(payload["password"])
            RecordStore.update(teacher, values)

        return teacher

    @staticmethod
    def delete_teacher(claims, teacher_id, requested_school_id=None) -> None:
        AccessGuard.require(claims, EntityType.TEACHER, Operation.DELETE)
        teacher = RecordStore.require(Teacher, teacher_id, "Docente")
        StaffService._operating_school_for(claims, teacher, requested_school_id)
        AccessGuard.require_can_manage_role(claims, teacher.role)

        if teacher.id == claims.actor_id:
            raise ConflictError("No podés borrar tu propia cuenta.")

        in_use = (
            RecordStore.count(Activity, teacher_id=teacher.id)
            + RecordStore.count(Evaluation, teacher_id=teacher.id)
            + RecordStore.count(Observation, teacher_id=teacher.id)
        )
        if in_use:
            raise ConflictError(
                "El docente tiene actividades, evaluaciones u observaciones asociadas y no puede borrarse."
            )

        with RecordStore.transaction():
            RecordStore.delete(teacher)
        logger.info("Docente %s borrado por %s", teacher_id, claims.actor_id)
