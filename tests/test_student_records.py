import pytest

from models import Observation, StudentCondition
from services.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from services.student_records_service import StudentRecordsService
from services.tenancy import Claims
from services.upsert_coordinator import UpsertCoordinator


def test_condition_duplicate_name_is_conflict(world):
    claims = Claims.from_teacher(world.supervisor)
    payload = {"student_id": world.student.id, "name": "Dislexia", "proof_status": "Pendiente"}

    StudentRecordsService.create_condition(claims, payload)
    with pytest.raises(ConflictError):
        StudentRecordsService.create_condition(claims, payload)

    assert StudentCondition.query.filter_by(student_id=world.student.id).count() == 1


def test_same_condition_for_different_students(world):
    StudentRecordsService.create_condition(
        Claims.from_teacher(world.supervisor),
        {"student_id": world.student.id, "name": "TDAH", "proof_status": "Comprobado"},
    )
    StudentRecordsService.create_condition(
        Claims.from_teacher(world.supervisor_b),
        {"student_id": world.other_student.id, "name": "TDAH", "proof_status": "Comprobado"},
    )
    assert StudentCondition.query.count() == 2


def test_condition_requires_fields(world):
    claims = Claims.from_teacher(world.supervisor)
    with pytest.raises(ValidationError):
        StudentRecordsService.create_condition(claims, {"student_id": world.student.id, "name": "TEA"})


def test_profesor_cannot_assign_conditions(world):
    with pytest.raises(ForbiddenError):
        StudentRecordsService.create_condition(
            Claims.from_teacher(world.profesor),
            {"student_id": world.student.id, "name": "TEA", "proof_status": "Pendiente"},
        )


def test_delete_condition_checks_school(world):
    condition = StudentRecordsService.create_condition(
        Claims.from_teacher(world.supervisor_b),
        {"student_id": world.other_student.id, "name": "TEA", "proof_status": "Pendiente"},
    )
    with pytest.raises(ForbiddenError):
        StudentRecordsService.delete_condition(Claims.from_teacher(world.supervisor), condition.id)

    StudentRecordsService.delete_condition(Claims.from_teacher(world.supervisor_b), condition.id)
    assert StudentCondition.query.count() == 0


def test_condition_suggestions(world):
    names = [s["name"] for s in StudentRecordsService.condition_suggestions(Claims.from_teacher(world.profesor))]
    assert "TDAH" in names


def test_observations_are_append_only(world):
    claims = Claims.from_teacher(world.profesor)
    StudentRecordsService.create_observation(claims, {"student_id": world.student.id, "text": "Primera"})
    StudentRecordsService.create_observation(claims, {"student_id": world.student.id, "text": "Segunda"})

    latest = StudentRecordsService.latest_observation(claims, world.student.id)
    history = StudentRecordsService.observation_history(claims, world.student.id)

    assert latest.text == "Segunda"
    assert [o.text for o in history] == ["Segunda", "Primera"]
    assert all(o.teacher_id == world.profesor.id for o in history)


def test_latest_observation_when_none(world):
    assert StudentRecordsService.latest_observation(Claims.from_teacher(world.profesor), world.student.id) is None


def test_observation_for_student_of_other_school(world):
    with pytest.raises(ForbiddenError):
        StudentRecordsService.create_observation(
            Claims.from_teacher(world.profesor), {"student_id": world.other_student.id, "text": "x"}
        )
    assert Observation.query.count() == 0


def test_reading_records_of_other_school(world):
    with pytest.raises(ForbiddenError):
        StudentRecordsService.list_evaluations(Claims.from_teacher(world.profesor), world.other_student.id)


def test_delete_grade(world):
    claims = Claims.from_teacher(world.supervisor)
    UpsertCoordinator.upsert_grade(
        claims, {"student_id": world.student.id, "subject_id": world.subject.id, "period": 3, "score": 6}
    )

    with pytest.raises(NotFoundError):
        StudentRecordsService.delete_grade(claims, world.student.id, world.subject.id, 4)

    StudentRecordsService.delete_grade(claims, world.student.id, world.subject.id, 3)
    assert StudentRecordsService.list_grades(claims, world.student.id) == []


def test_full_data_bundle(world):
    supervisor = Claims.from_teacher(world.supervisor)
    UpsertCoordinator.upsert_evaluation(
        supervisor, {"student_id": world.student.id, "activity_id": world.activity.id, "score": 8}
    )
    UpsertCoordinator.upsert_grade(
        supervisor, {"student_id": world.student.id, "subject_id": world.subject.id, "period": 1, "score": 7}
    )
    StudentRecordsService.create_condition(
        supervisor, {"student_id": world.student.id, "name": "TDAH", "proof_status": "Comprobado"}
    )

    bundle = StudentRecordsService.full_data(Claims.from_teacher(world.profesor), world.student.id)

    assert bundle["student"].id == world.student.id
    assert bundle["school_class"].name == "5° A"
    assert len(bundle["evaluations"]) == 1
    assert len(bundle["grades"]) == 1
    assert [c.name for c in bundle["conditions"]] == ["TDAH"]
    assert bundle["insights"] == []


def test_profesor_cannot_sign_observation_as_someone_else(world):
    with pytest.raises(ForbiddenError):
        StudentRecordsService.create_observation(
            Claims.from_teacher(world.profesor),
            {"student_id": world.student.id, "text": "x", "teacher_id": world.other_profesor.id},
        )
    assert Observation.query.count() == 0


def test_supervisor_may_credit_observation_to_a_teacher(world):
    observation = StudentRecordsService.create_observation(
        Claims.from_teacher(world.supervisor),
        {"student_id": world.student.id, "text": "Dictado", "teacher_id": world.profesor.id},
    )
    assert observation.teacher_id == world.profesor.id
