from datetime import datetime

from extensions import db


class BimonthlyGrade(db.Model):
    """Nota bimestral por materia. period va de 1 a 4."""

    __tablename__ = "bimonthly_grade"

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=False, index=True)
    subject_id = db.Column(db.Integer, db.ForeignKey("subject.id"), nullable=False, index=True)
    period = db.Column(db.Integer, nullable=False)
    score = db.Column(db.Float, nullable=False)
    remediation_score = db.Column(db.Float, nullable=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    student = db.relationship("Student")
    subject = db.relationship("Subject")

    __table_args__ = (
        db.UniqueConstraint(
            "student_id", "subject_id", "period", name="uq_bimonthly_grade_student_subject_period"
        ),
    )

    @property
    def owning_school_id(self):
        return self.student.school_id if self.student else None
