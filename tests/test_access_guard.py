import pytest

from models import RoleEnum
from services.access_guard import (
    PERMISSIONS,
    AccessGuard,
    EntityType,
    Operation,
    Permission,
)
from services.errors import ForbiddenError
from services.tenancy import Claims


def test_table_is_exhaustive():
    for role in RoleEnum:
        for entity in EntityType:
            for op in Operation:
                assert isinstance(PERMISSIONS[role][entity][op], Permission)


def test_admin_allowed_everywhere():
    for entity in EntityType:
        for op in Operation:
            assert AccessGuard.check_permission(RoleEnum.ADMIN, entity, op).allowed


@pytest.mark.parametrize("op", [Operation.CREATE, Operation.UPDATE, Operation.DELETE])
def test_supervisor_cannot_manage_schools(op):
    assert not AccessGuard.check_permission(RoleEnum.SUPERVISOR, EntityType.SCHOOL, op)


def test_supervisor_manages_school_records():
    for entity in EntityType:
        if entity == EntityType.SCHOOL:
            continue
        for op in Operation:
            assert AccessGuard.check_permission(RoleEnum.SUPERVISOR, entity, op).allowed


def test_profesor_reads_everything():
    for entity in EntityType:
        for op in (Operation.LIST, Operation.READ):
            assert AccessGuard.check_permission(RoleEnum.PROFESOR, entity, op).allowed


@pytest.mark.parametrize(
    "entity, op",
    [
        (EntityType.STUDENT, Operation.CREATE),
        (EntityType.STUDENT, Operation.DELETE),
        (EntityType.SUBJECT, Operation.CREATE),
        (EntityType.SCHOOL_CLASS, Operation.UPDATE),
        (EntityType.CONDITION, Operation.CREATE),
        (EntityType.BIMONTHLY_GRADE, Operation.UPDATE),
        (EntityType.ACTIVITY, Operation.DELETE),
        (EntityType.TEACHER, Operation.CREATE),
        (EntityType.EVALUATION, Operation.DELETE),
    ],
)
def test_profesor_denied_writes(entity, op):
    assert PERMISSIONS[RoleEnum.PROFESOR][entity][op] == Permission.DENY
    assert not AccessGuard.check_permission(RoleEnum.PROFESOR, entity, op, actor_id=1, owner_id=1)


def test_profesor_owned_activity_and_evaluation():
    for entity in (EntityType.ACTIVITY, EntityType.EVALUATION):
        for op in (Operation.CREATE, Operation.UPDATE):
            assert AccessGuard.check_permission(RoleEnum.PROFESOR, entity, op, actor_id=3, owner_id=3)
            assert not AccessGuard.check_permission(
                RoleEnum.PROFESOR, entity, op, actor_id=3, owner_id=4
            )
            assert not AccessGuard.check_permission(RoleEnum.PROFESOR, entity, op, actor_id=3)


def test_profesor_can_write_observations_and_insights():
    assert AccessGuard.check_permission(
        RoleEnum.PROFESOR, EntityType.OBSERVATION, Operation.CREATE, actor_id=3, owner_id=3
    )
    assert not AccessGuard.check_permission(
        RoleEnum.PROFESOR, EntityType.OBSERVATION, Operation.CREATE, actor_id=3, owner_id=4
    )
    assert AccessGuard.check_permission(RoleEnum.PROFESOR, EntityType.INSIGHT, Operation.CREATE)


def test_require_raises_forbidden():
    claims = Claims(actor_id=3, role=RoleEnum.PROFESOR, school_id=1)
    with pytest.raises(ForbiddenError):
        AccessGuard.require(claims, EntityType.STUDENT, Operation.CREATE)


def test_only_admin_manages_admin_accounts():
    supervisor = Claims(actor_id=2, role=RoleEnum.SUPERVISOR, school_id=1)
    admin = Claims(actor_id=1, role=RoleEnum.ADMIN)

    with pytest.raises(ForbiddenError):
        AccessGuard.require_can_manage_role(supervisor, RoleEnum.ADMIN)
    with pytest.raises(ForbiddenError):
        AccessGuard.require_can_manage_role(supervisor, RoleEnum.PROFESOR, current_role=RoleEnum.ADMIN)

    AccessGuard.require_can_manage_role(supervisor, RoleEnum.PROFESOR)
    AccessGuard.require_can_manage_role(admin, RoleEnum.ADMIN)
