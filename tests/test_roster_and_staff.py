import pytest

from extensions import db
from models import RoleEnum, School, SchoolClass, Student, Subject, Teacher
from services.errors import ConflictError, ForbiddenError, TenantMismatchError, ValidationError
from services.activity_service import ActivityService
from services.roster_service import RosterService
from services.school_service import SchoolService
from services.staff_service import StaffService
from services.tenancy import Claims


# -------------------------
# Alumnos
# -------------------------

def test_create_student_in_own_school(world):
    claims = Claims.from_teacher(world.supervisor)
    student = RosterService.create_student(
        claims,
        {"name": "Carla", "registration_number": "A-002", "class_id": world.school_class.id, "age": "10"},
    )
    assert student.school_id == world.school.id
    assert student.age == 10


def test_student_with_class_from_other_school(world):
    claims = Claims.from_teacher(world.supervisor)
    with pytest.raises(TenantMismatchError):
        RosterService.create_student(
            claims,
            {"name": "Carla", "registration_number": "A-002", "class_id": world.other_class.id},
        )
    assert Student.query.filter_by(registration_number="A-002").first() is None


def test_registration_number_is_global(world):
    claims = Claims.from_teacher(world.supervisor)
    with pytest.raises(ConflictError):
        RosterService.create_student(
            claims,
            {"name": "Copia", "registration_number": "B-001", "class_id": world.school_class.id},
        )


def test_admin_must_pick_a_school(world):
    admin = Claims.from_teacher(world.admin)
    assert RosterService.list_students(admin) == []
    with pytest.raises(ForbiddenError):
        RosterService.create_student(
            admin, {"name": "X", "registration_number": "X-1", "class_id": world.school_class.id}
        )

    listed = RosterService.list_students(admin, world.other_school.id)
    assert [s.id for s in listed] == [world.other_student.id]


def test_non_admin_listing_ignores_requested_school(world):
    listed = RosterService.list_students(Claims.from_teacher(world.profesor), world.other_school.id)
    assert [s.id for s in listed] == [world.student.id]


def test_update_student_moves_class_within_school(world):
    claims = Claims.from_teacher(world.supervisor)
    new_class = RosterService.create_class(claims, {"name": "6° B"})
    student = RosterService.update_student(claims, world.student.id, {"class_id": new_class.id})
    assert student.class_id == new_class.id

    with pytest.raises(TenantMismatchError):
        RosterService.update_student(claims, world.student.id, {"class_id": world.other_class.id})


# -------------------------
# Turmas y materias
# -------------------------

def test_class_names_unique_per_school(world):
    claims = Claims.from_teacher(world.supervisor)
    with pytest.raises(ConflictError):
        RosterService.create_class(claims, {"name": "5° A"})
    # el mismo nombre existe en la escuela B y no molesta
    assert SchoolClass.query.filter_by(name="5° A").count() == 2


def test_delete_class_with_students_is_conflict(world):
    claims = Claims.from_teacher(world.supervisor)
    with pytest.raises(ConflictError):
        RosterService.delete_class(claims, world.school_class.id)

    empty = RosterService.create_class(claims, {"name": "Vacía"})
    empty_id = empty.id
    RosterService.delete_class(claims, empty_id)
    assert db.session.get(SchoolClass, empty_id) is None


def test_delete_subject_in_use_is_conflict(world):
    claims = Claims.from_teacher(world.supervisor)
    with pytest.raises(ConflictError):
        RosterService.delete_subject(claims, world.subject.id)

    RosterService.delete_subject(claims, world.subject2.id)
    assert Subject.query.filter_by(school_id=world.school.id).count() == 1


def test_profesor_cannot_create_subjects(world):
    with pytest.raises(ForbiddenError):
        RosterService.create_subject(Claims.from_teacher(world.profesor), {"name": "Historia"})


# -------------------------
# Actividades
# -------------------------

def test_profesor_creates_activity_in_own_name(world):
    claims = Claims.from_teacher(world.profesor)
    activity = ActivityService.create_activity(
        claims, {"kind": "Seminario", "subject_id": world.subject.id, "max_score": "20"}
    )
    assert activity.teacher_id == world.profesor.id
    assert activity.max_score == 20.0

    with pytest.raises(ForbiddenError):
        ActivityService.create_activity(
            claims,
            {"kind": "Seminario", "subject_id": world.subject.id, "teacher_id": world.other_profesor.id},
        )


def test_profesor_cannot_edit_or_delete_others_activities(world):
    other = Claims.from_teacher(world.other_profesor)
    with pytest.raises(ForbiddenError):
        ActivityService.update_activity(other, world.activity.id, {"kind": "Cambio"})
    with pytest.raises(ForbiddenError):
        ActivityService.delete_activity(Claims.from_teacher(world.profesor), world.activity.id)


def test_activity_with_foreign_subject(world):
    with pytest.raises(TenantMismatchError):
        ActivityService.create_activity(
            Claims.from_teacher(world.supervisor),
            {"kind": "Prueba", "subject_id": world.other_subject.id, "teacher_id": world.profesor.id},
        )


# -------------------------
# Docentes y escuelas
# -------------------------

def test_duplicate_teacher_registration_is_conflict(world):
    claims = Claims.from_teacher(world.supervisor)
    with pytest.raises(ConflictError):
        StaffService.create_teacher(
            claims, {"name": "Copia", "registration": "profe-a", "password": "x", "role": "PROFESOR"}
        )


def test_supervisor_cannot_create_admin(world):
    claims = Claims.from_teacher(world.supervisor)
    with pytest.raises(ForbiddenError):
        StaffService.create_teacher(
            claims, {"name": "Jefe", "registration": "jefe", "password": "x", "role": "Administrador"}
        )
    with pytest.raises(ForbiddenError):
        StaffService.update_teacher(claims, world.profesor.id, {"role": "ADMIN"})


def test_unknown_role_is_validation_error(world):
    with pytest.raises(ValidationError):
        StaffService.create_teacher(
            Claims.from_teacher(world.supervisor),
            {"name": "Nuevo", "registration": "nuevo", "password": "x", "role": "Director"},
        )


def test_admin_creates_admin_without_school(world):
    teacher = StaffService.create_teacher(
        Claims.from_teacher(world.admin),
        {"name": "Otro admin", "registration": "admin2", "password": "clave", "role": "ADMIN"},
    )
    assert teacher.school_id is None
    assert teacher.role == RoleEnum.ADMIN
    assert StaffService.authenticate("admin2", "clave").id == teacher.id
    assert StaffService.authenticate("admin2", "otra") is None


def test_delete_teacher_with_activities_is_conflict(world):
    claims = Claims.from_teacher(world.supervisor)
    with pytest.raises(ConflictError):
        StaffService.delete_teacher(claims, world.profesor.id)

    other_id = world.other_profesor.id
    StaffService.delete_teacher(claims, other_id)
    assert db.session.get(Teacher, other_id) is None


def test_teachers_of_other_school_are_out_of_reach(world):
    with pytest.raises(ForbiddenError):
        StaffService.update_teacher(Claims.from_teacher(world.supervisor), world.profesor_b.id, {"name": "X"})


def test_school_management(world):
    admin = Claims.from_teacher(world.admin)
    school = SchoolService.create_school(admin, {"name": "Escuela C", "address": "Ruta 3"})
    assert SchoolService.get_school(admin, school.id).address == "Ruta 3"

    with pytest.raises(ConflictError):
        SchoolService.create_school(admin, {"name": "Escuela A"})
    with pytest.raises(ConflictError):
        SchoolService.delete_school(admin, world.school.id)
    with pytest.raises(ForbiddenError):
        SchoolService.create_school(Claims.from_teacher(world.supervisor), {"name": "Escuela D"})

    school_id = school.id
    SchoolService.delete_school(admin, school_id)
    assert db.session.get(School, school_id) is None


def test_non_admin_sees_only_own_school(world):
    claims = Claims.from_teacher(world.profesor)
    assert [s.id for s in SchoolService.list_schools(claims)] == [world.school.id]
    with pytest.raises(ForbiddenError):
        SchoolService.get_school(claims, world.other_school.id)
