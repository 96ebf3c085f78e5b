from datetime import datetime

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from extensions import db
from .roles import RoleEnum


class Teacher(UserMixin, db.Model):
    """
    Docente: cualquier actor que se autentica (Administrador, Supervisor o Professor).
    El Administrador puede no tener escuela asociada.
    """

    __tablename__ = "teacher"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=True)
    registration = db.Column(db.String(50), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Enum(RoleEnum), nullable=False, default=RoleEnum.PROFESOR)
    school_id = db.Column(db.Integer, db.ForeignKey("school.id"), nullable=True, index=True)
    active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    school = db.relationship("School")

    @property
    def is_active(self):
        return bool(self.active)

    @property
    def owning_school_id(self):
        return self.school_id

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)
