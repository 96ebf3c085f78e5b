from datetime import datetime

from extensions import db


class Insight(db.Model):
    """
    Texto generado por IA a partir de la foto de datos de un alumno.
    Se guarda el input usado para poder auditar qué vio el modelo.
    """

    __tablename__ = "insight"

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=False, index=True)
    input_snapshot = db.Column(db.JSON, nullable=False)
    prompt = db.Column(db.Text, nullable=True)
    text = db.Column(db.Text, nullable=False)
    ai_model = db.Column(db.String(100), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    student = db.relationship("Student")

    @property
    def owning_school_id(self):
        return self.student.school_id if self.student else None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "student_id": self.student_id,
            "input_snapshot": self.input_snapshot,
            "prompt": self.prompt,
            "text": self.text,
            "ai_model": self.ai_model,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
