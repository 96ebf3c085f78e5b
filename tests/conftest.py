import pytest
from flask import g
from flask.testing import FlaskClient

from app import create_app
from config import TestConfig
from extensions import db
from models import (
    Activity,
    RoleEnum,
    School,
    SchoolClass,
    Student,
    Subject,
    Teacher,
)
from services.tenancy import Claims
from services.tokens import create_access_token


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


class PerRequestUserClient(FlaskClient):
    """
    Los tests corren dentro de un único app context, y el test client lo
    reutiliza en cada request. Flask-Login cachea el usuario en
    `g._login_user`, así que se limpia antes de cada request para que el token
    de esa request sea el que decide quién es el actor.
    """

    def open(self, *args, **kwargs):
        g.pop("_login_user", None)
        return super().open(*args, **kwargs)


@pytest.fixture
def client(app):
    app.test_client_class = PerRequestUserClient
    return app.test_client()


def _teacher(registration, role, school, password="secret123"):
    teacher = Teacher(
        name=f"Docente {registration}",
        registration=registration,
        email=f"{registration}@test.edu",
        role=role,
        school_id=school.id if school else None,
    )
    teacher.set_password(password)
    db.session.add(teacher)
    return teacher


@pytest.fixture
def world(app):
    """
    Dos escuelas con su turma, materia, alumno y actividad, más un docente
    por rol. `world.other_*` es la escuela B.
    """
    school_a = School(name="Escuela A")
    school_b = School(name="Escuela B")
    db.session.add_all([school_a, school_b])
    db.session.flush()

    admin = _teacher("admin", RoleEnum.ADMIN, None)
    supervisor = _teacher("super-a", RoleEnum.SUPERVISOR, school_a)
    profesor = _teacher("profe-a", RoleEnum.PROFESOR, school_a)
    other_profesor = _teacher("profe-a2", RoleEnum.PROFESOR, school_a)
    supervisor_b = _teacher("super-b", RoleEnum.SUPERVISOR, school_b)
    profesor_b = _teacher("profe-b", RoleEnum.PROFESOR, school_b)
    orphan = _teacher("sin-escuela", RoleEnum.PROFESOR, None)
    db.session.flush()

    class_a = SchoolClass(school_id=school_a.id, name="5° A")
    class_b = SchoolClass(school_id=school_b.id, name="5° A")
    subject_a = Subject(school_id=school_a.id, name="Matemática")
    subject_a2 = Subject(school_id=school_a.id, name="Lengua")
    subject_b = Subject(school_id=school_b.id, name="Matemática")
    db.session.add_all([class_a, class_b, subject_a, subject_a2, subject_b])
    db.session.flush()

    student_a = Student(
        name="Ana", registration_number="A-001", age=11, class_id=class_a.id, school_id=school_a.id
    )
    student_b = Student(
        name="Beto", registration_number="B-001", age=12, class_id=class_b.id, school_id=school_b.id
    )
    db.session.add_all([student_a, student_b])
    db.session.flush()

    activity_a = Activity(
        school_id=school_a.id,
        subject_id=subject_a.id,
        teacher_id=profesor.id,
        kind="Prueba",
        max_score=10.0,
    )
    activity_b = Activity(
        school_id=school_b.id,
        subject_id=subject_b.id,
        teacher_id=profesor_b.id,
        kind="Trabajo práctico",
        max_score=10.0,
    )
    db.session.add_all([activity_a, activity_b])
    db.session.commit()

    class World:
        pass

    w = World()
    w.school = school_a
    w.other_school = school_b
    w.admin = admin
    w.supervisor = supervisor
    w.profesor = profesor
    w.other_profesor = other_profesor
    w.supervisor_b = supervisor_b
    w.profesor_b = profesor_b
    w.orphan = orphan
    w.school_class = class_a
    w.other_class = class_b
    w.subject = subject_a
    w.subject2 = subject_a2
    w.other_subject = subject_b
    w.student = student_a
    w.other_student = student_b
    w.activity = activity_a
    w.other_activity = activity_b
    return w


@pytest.fixture
def claims_for():
    return Claims.from_teacher


@pytest.fixture
def auth_headers(app):
    def _headers(teacher):
        token = create_access_token(teacher, app.config)
        return {"Authorization": f"Bearer {token}"}

    return _headers
