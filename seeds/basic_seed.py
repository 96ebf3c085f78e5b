# seeds/basic_seed.py
"""
Seed para demos del registro escolar.

CREA (o reutiliza si ya existen):
    - Dos escuelas
    - Un Administrador sin escuela, y un Supervisor y un Professor por escuela
    - Turmas, materias y alumnos
    - Una actividad con evaluaciones, notas bimestrales, una observación y una condición

Modo de uso:
    flask --app app:create_app seed-demo
  o bien
    flask shell
    >>> from seeds.basic_seed import run_basic_seed
    >>> run_basic_seed()
"""

from extensions import db
from models import (
    Activity,
    BimonthlyGrade,
    Evaluation,
    Observation,
    RoleEnum,
    School,
    SchoolClass,
    Student,
    StudentCondition,
    Subject,
    Teacher,
)

DEMO_PASSWORDS = {
    "admin": "admin123",
    "super-norte": "super123",
    "profe-norte": "profe123",
    "super-sur": "super123",
    "profe-sur": "profe123",
}


def _get_or_create(model, defaults=None, **kwargs):
    instance = model.query.filter_by(**kwargs).first()
    if instance:
        return instance, False

    params = {**kwargs}
    if defaults:
        params.update(defaults)

    instance = model(**params)
    db.session.add(instance)
    db.session.flush()
    return instance, True


def _ensure_teacher(registration, name, role, school_id):
    teacher, created = _get_or_create(
        Teacher,
        registration=registration,
        defaults={
            "name": name,
            "email": f"{registration}@demo.edu",
            "role": role,
            "school_id": school_id,
            "password_hash": "",
        },
    )
    if created or not teacher.password_hash:
        teacher.set_password(DEMO_PASSWORDS.get(registration, "changeme123"))
    return teacher


def _seed_school(name, prefix):
    school, _ = _get_or_create(School, name=name, defaults={"address": f"Calle {prefix} 123"})

    supervisor = _ensure_teacher(f"super-{prefix}", f"Supervisor {name}", RoleEnum.SUPERVISOR, school.id)
    teacher = _ensure_teacher(f"profe-{prefix}", f"Profesor {name}", RoleEnum.PROFESOR, school.id)

    class_a, _ = _get_or_create(SchoolClass, school_id=school.id, name="5° A")
    math, _ = _get_or_create(Subject, school_id=school.id, name="Matemática")
    language, _ = _get_or_create(Subject, school_id=school.id, name="Lengua")

    students = []
    for index, student_name in enumerate(("Ana Pérez", "Bruno Díaz", "Carla Gómez"), start=1):
        student, _ = _get_or_create(
            Student,
            registration_number=f"{prefix.upper()}-{index:03d}",
            defaults={
                "name": student_name,
                "age": 10 + index,
                "class_id": class_a.id,
                "school_id": school.id,
            },
        )
        students.append(student)

    activity, _ = _get_or_create(
        Activity,
        school_id=school.id,
        subject_id=math.id,
        teacher_id=teacher.id,
        kind="Prueba",
        defaults={"location": "Aula", "dynamics": "Individual", "max_score": 10.0},
    )

    for student, score in zip(students, (8.5, 6.0, 9.0)):
        _get_or_create(
            Evaluation,
            student_id=student.id,
            activity_id=activity.id,
            defaults={"teacher_id": teacher.id, "score": score, "on_time": True},
        )
        for subject, grade in ((math, score), (language, score - 0.5)):
            _get_or_create(
                BimonthlyGrade,
                student_id=student.id,
                subject_id=subject.id,
                period=1,
                defaults={"score": grade},
            )

    _get_or_create(
        Observation,
        student_id=students[1].id,
        teacher_id=teacher.id,
        defaults={"text": "Se distrae en clase; mejora con consignas cortas."},
    )
    _get_or_create(
        StudentCondition,
        student_id=students[1].id,
        name="TDAH",
        defaults={"proof_status": "Comprobado", "description": "Informe médico presentado."},
    )

    return {"school": school.name, "supervisor": supervisor.registration, "teacher": teacher.registration}


def run_basic_seed():
    _ensure_teacher("admin", "Administrador General", RoleEnum.ADMIN, None)
    schools = [
        _seed_school("Escuela Norte", "norte"),
        _seed_school("Escuela Sur", "sur"),
    ]
    db.session.commit()
    return schools
