from .roles import RoleEnum
from .school import School, SchoolClass, Subject
from .user import Teacher
from .student import Student, StudentCondition, Observation
from .activity import Activity, Evaluation
from .grades import BimonthlyGrade
from .insight import Insight

__all__ = [
    "RoleEnum",
    "School",
    "SchoolClass",
    "Subject",
    "Teacher",
    "Student",
    "StudentCondition",
    "Observation",
    "Activity",
    "Evaluation",
    "BimonthlyGrade",
    "Insight",
]
