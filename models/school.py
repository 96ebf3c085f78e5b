from datetime import datetime

from extensions import db


class School(db.Model):
    """Escuela: la unidad de aislamiento de datos (tenant)."""

    __tablename__ = "school"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), unique=True, nullable=False)
    address = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def owning_school_id(self):
        return self.id


class SchoolClass(db.Model):
    """Turma / curso (ej. "5° A")."""

    __tablename__ = "school_class"

    id = db.Column(db.Integer, primary_key=True)
    school_id = db.Column(db.Integer, db.ForeignKey("school.id"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    school = db.relationship("School")

    __table_args__ = (
        db.UniqueConstraint("school_id", "name", name="uq_school_class_school_name"),
    )

    @property
    def owning_school_id(self):
        return self.school_id


class Subject(db.Model):
    __tablename__ = "subject"

    id = db.Column(db.Integer, primary_key=True)
    school_id = db.Column(db.Integer, db.ForeignKey("school.id"), nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    school = db.relationship("School")

    __table_args__ = (
        db.UniqueConstraint("school_id", "name", name="uq_subject_school_name"),
    )

    @property
    def owning_school_id(self):
        return self.school_id
