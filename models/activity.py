from datetime import datetime

from extensions import db


class Activity(db.Model):
    __tablename__ = "activity"

    id = db.Column(db.Integer, primary_key=True)
    school_id = db.Column(db.Integer, db.ForeignKey("school.id"), nullable=False, index=True)
    subject_id = db.Column(db.Integer, db.ForeignKey("subject.id"), nullable=False, index=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey("teacher.id"), nullable=False, index=True)

    # Tipo de actividad (prueba, trabajo, seminario...) y sus características
    kind = db.Column(db.String(100), nullable=False)
    location = db.Column(db.String(100), nullable=True)
    completion_time = db.Column(db.String(100), nullable=True)
    dynamics = db.Column(db.String(100), nullable=True)
    open_book = db.Column(db.Boolean, default=False)
    creative_freedom = db.Column(db.Boolean, default=False)
    description = db.Column(db.Text, nullable=True)

    max_score = db.Column(db.Float, nullable=False, default=10.0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    subject = db.relationship("Subject")
    teacher = db.relationship("Teacher")
    school = db.relationship("School")

    @property
    def owning_school_id(self):
        return self.school_id


class Evaluation(db.Model):
    """Nota de un alumno en una actividad. Una sola por par (alumno, actividad)."""

    __tablename__ = "evaluation"

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=False, index=True)
    activity_id = db.Column(db.Integer, db.ForeignKey("activity.id"), nullable=False, index=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey("teacher.id"), nullable=False)

    score = db.Column(db.Float, nullable=False)
    narrative = db.Column(db.Text, nullable=True)
    on_time = db.Column(db.Boolean, nullable=True)
    evaluated_at = db.Column(db.DateTime, default=datetime.utcnow)

    student = db.relationship("Student")
    activity = db.relationship("Activity")
    teacher = db.relationship("Teacher")

    __table_args__ = (
        db.UniqueConstraint("student_id", "activity_id", name="uq_evaluation_student_activity"),
    )

    @property
    def owning_school_id(self):
        return self.activity.school_id if self.activity else None
