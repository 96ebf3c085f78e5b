from datetime import datetime

from extensions import db


class Student(db.Model):
    __tablename__ = "student"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    # Matrícula: única en todo el sistema, no solo dentro de la escuela
    registration_number = db.Column(db.String(50), unique=True, nullable=False)
    age = db.Column(db.Integer, nullable=True)
    class_id = db.Column(db.Integer, db.ForeignKey("school_class.id"), nullable=False, index=True)
    school_id = db.Column(db.Integer, db.ForeignKey("school.id"), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    school_class = db.relationship("SchoolClass")
    school = db.relationship("School")

    @property
    def owning_school_id(self):
        return self.school_id


class StudentCondition(db.Model):
    """
    Condición declarada para un alumno (TDAH, dislexia, etc.). El nombre es texto
    libre y no puede repetirse para el mismo alumno.
    """

    __tablename__ = "student_condition"

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False)
    proof_status = db.Column(db.String(50), nullable=False)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    student = db.relationship("Student")

    __table_args__ = (
        db.UniqueConstraint("student_id", "name", name="uq_student_condition_student_name"),
    )

    @property
    def owning_school_id(self):
        return self.student.school_id if self.student else None


class Observation(db.Model):
    """Historial de observaciones: cada POST agrega una fila nueva, nunca se edita."""

    __tablename__ = "observation"

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=False, index=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey("teacher.id"), nullable=False)
    text = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    student = db.relationship("Student")
    teacher = db.relationship("Teacher")

    @property
    def owning_school_id(self):
        return self.student.school_id if self.student else None
