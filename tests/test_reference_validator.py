import pytest

from services.access_guard import EntityType
from services.errors import ForbiddenError, NotFoundError, TenantMismatchError, ValidationError
from services.reference_validator import ReferenceValidator


def test_returns_loaded_entities(world):
    refs = ReferenceValidator.validate_references(
        EntityType.EVALUATION,
        world.school.id,
        {"student_id": world.student.id, "activity_id": str(world.activity.id)},
    )
    assert refs["student_id"].id == world.student.id
    assert refs["activity_id"].id == world.activity.id


def test_reference_from_other_school_is_forbidden(world):
    with pytest.raises(TenantMismatchError) as excinfo:
        ReferenceValidator.validate_references(
            EntityType.STUDENT, world.school.id, {"class_id": world.other_class.id}
        )
    assert excinfo.value.ref_name == "class_id"
    assert isinstance(excinfo.value, ForbiddenError)
    assert excinfo.value.status_code == 403


def test_missing_reference_is_not_found(world):
    with pytest.raises(NotFoundError):
        ReferenceValidator.validate_references(
            EntityType.BIMONTHLY_GRADE,
            world.school.id,
            {"student_id": world.student.id, "subject_id": 9999},
        )


def test_unknown_reference_name(world):
    with pytest.raises(ValidationError):
        ReferenceValidator.validate_references(
            EntityType.CONDITION, world.school.id, {"activity_id": world.activity.id}
        )


def test_non_numeric_reference(world):
    with pytest.raises(ValidationError):
        ReferenceValidator.validate_references(
            EntityType.INSIGHT, world.school.id, {"student_id": "abc"}
        )


def test_teacher_reference_checks_school(world):
    refs = ReferenceValidator.validate_references(
        EntityType.ACTIVITY,
        world.school.id,
        {"subject_id": world.subject.id, "teacher_id": world.profesor.id},
    )
    assert refs["teacher_id"].id == world.profesor.id

    with pytest.raises(TenantMismatchError) as excinfo:
        ReferenceValidator.validate_references(
            EntityType.ACTIVITY,
            world.school.id,
            {"subject_id": world.subject.id, "teacher_id": world.profesor_b.id},
        )
    assert excinfo.value.ref_name == "teacher_id"
