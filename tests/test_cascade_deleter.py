import pytest

from extensions import db
from models import (
    Activity,
    BimonthlyGrade,
    Evaluation,
    Insight,
    Observation,
    Student,
    StudentCondition,
)
from services.cascade_deleter import CascadeDeleter
from services.errors import ForbiddenError, NotFoundError
from services.store import RecordStore
from services.tenancy import Claims


def _fill_student_records(world):
    student = world.student
    second_activity = Activity(
        school_id=world.school.id,
        subject_id=world.subject2.id,
        teacher_id=world.profesor.id,
        kind="Seminario",
        max_score=10.0,
    )
    db.session.add(second_activity)
    db.session.flush()

    db.session.add_all([
        Evaluation(student_id=student.id, activity_id=world.activity.id, teacher_id=world.profesor.id, score=7),
        Evaluation(student_id=student.id, activity_id=second_activity.id, teacher_id=world.profesor.id, score=9),
        Observation(student_id=student.id, teacher_id=world.profesor.id, text="Participa poco."),
        Observation(student_id=student.id, teacher_id=world.profesor.id, text="Mejoró."),
        StudentCondition(student_id=student.id, name="TDAH", proof_status="Comprobado"),
        BimonthlyGrade(student_id=student.id, subject_id=world.subject.id, period=1, score=8),
        Insight(student_id=student.id, input_snapshot={}, text="Informe"),
    ])
    # Registros de otro alumno que no deben tocarse
    db.session.add(
        Observation(student_id=world.other_student.id, teacher_id=world.profesor_b.id, text="Otro")
    )
    db.session.commit()
    return second_activity


def _dependents(student_id):
    return {
        "conditions": StudentCondition.query.filter_by(student_id=student_id).count(),
        "evaluations": Evaluation.query.filter_by(student_id=student_id).count(),
        "observations": Observation.query.filter_by(student_id=student_id).count(),
        "grades": BimonthlyGrade.query.filter_by(student_id=student_id).count(),
        "insights": Insight.query.filter_by(student_id=student_id).count(),
    }


def test_delete_student_removes_all_dependents(world):
    _fill_student_records(world)
    student_id = world.student.id

    summary = CascadeDeleter.delete_student(Claims.from_teacher(world.supervisor), student_id)

    assert summary == {
        "conditions": 1,
        "evaluations": 2,
        "observations": 2,
        "bimonthly_grades": 1,
        "insights": 1,
    }
    assert db.session.get(Student, student_id) is None
    assert all(total == 0 for total in _dependents(student_id).values())
    assert Observation.query.filter_by(student_id=world.other_student.id).count() == 1


def test_failure_mid_cascade_leaves_everything_intact(world, monkeypatch):
    _fill_student_records(world)
    student_id = world.student.id
    before = _dependents(student_id)

    original = RecordStore.delete_rows
    calls = {"n": 0}

    def flaky_delete_rows(rows):
        calls["n"] += 1
        if calls["n"] == 2:
            raise RuntimeError("fallo inyectado")
        return original(rows)

    monkeypatch.setattr(RecordStore, "delete_rows", staticmethod(flaky_delete_rows))

    with pytest.raises(RuntimeError):
        CascadeDeleter.delete_student(Claims.from_teacher(world.admin), student_id, world.school.id)

    assert calls["n"] == 2
    assert db.session.get(Student, student_id) is not None
    assert _dependents(student_id) == before


def test_delete_student_of_other_school_is_forbidden(world):
    _fill_student_records(world)
    with pytest.raises(ForbiddenError):
        CascadeDeleter.delete_student(Claims.from_teacher(world.supervisor), world.other_student.id)
    assert db.session.get(Student, world.other_student.id) is not None


def test_delete_missing_student_is_not_found(world):
    with pytest.raises(NotFoundError):
        CascadeDeleter.delete_student(Claims.from_teacher(world.supervisor), 9999)


def test_profesor_cannot_delete_students(world):
    with pytest.raises(ForbiddenError):
        CascadeDeleter.delete_student(Claims.from_teacher(world.profesor), world.student.id)


def test_delete_activity_keeps_bimonthly_grades(world):
    _fill_student_records(world)
    activity_id = world.activity.id

    summary = CascadeDeleter.delete_activity(Claims.from_teacher(world.supervisor), activity_id)

    assert summary == {"evaluations": 1}
    assert db.session.get(Activity, activity_id) is None
    assert Evaluation.query.filter_by(activity_id=activity_id).count() == 0
    # la otra evaluación del alumno y sus notas bimestrales siguen
    assert Evaluation.query.filter_by(student_id=world.student.id).count() == 1
    assert BimonthlyGrade.query.filter_by(subject_id=world.subject.id).count() == 1
