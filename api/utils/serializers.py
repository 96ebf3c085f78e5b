# api/utils/serializers.py
"""
Formas JSON que devuelve la API. Las fechas van en ISO 8601.
"""


def _iso(value):
    return value.isoformat() if value else None


def school_json(school):
    return {
        "id": school.id,
        "name": school.name,
        "address": school.address,
        "created_at": _iso(school.created_at),
    }


def role_json(role):
    return {"id": role.name, "name": role.value}


def teacher_json(teacher):
    return {
        "id": teacher.id,
        "name": teacher.name,
        "email": teacher.email,
        "registration": teacher.registration,
        "role": teacher.role.value,
        "school_id": teacher.school_id,
    }


def class_json(school_class):
    return {"id": school_class.id, "name": school_class.name, "school_id": school_class.school_id}


def subject_json(subject):
    return {"id": subject.id, "name": subject.name, "school_id": subject.school_id}


def student_json(student):
    return {
        "id": student.id,
        "name": student.name,
        "registration_number": student.registration_number,
        "age": student.age,
        "class_id": student.class_id,
        "class_name": student.school_class.name if student.school_class else None,
        "school_id": student.school_id,
    }


def activity_json(activity):
    return {
        "id": activity.id,
        "kind": activity.kind,
        "location": activity.location,
        "completion_time": activity.completion_time,
        "dynamics": activity.dynamics,
        "open_book": activity.open_book,
        "creative_freedom": activity.creative_freedom,
        "description": activity.description,
        "max_score": activity.max_score,
        "subject_id": activity.subject_id,
        "subject_name": activity.subject.name if activity.subject else None,
        "teacher_id": activity.teacher_id,
        "teacher_name": activity.teacher.name if activity.teacher else None,
        "school_id": activity.school_id,
    }


def evaluation_json(evaluation):
    activity = evaluation.activity
    return {
        "id": evaluation.id,
        "student_id": evaluation.student_id,
        "activity_id": evaluation.activity_id,
        "teacher_id": evaluation.teacher_id,
        "teacher_name": evaluation.teacher.name if evaluation.teacher else None,
        "score": evaluation.score,
        "narrative": evaluation.narrative,
        "on_time": evaluation.on_time,
        "evaluated_at": _iso(evaluation.evaluated_at),
        "activity": {
            "kind": activity.kind,
            "max_score": activity.max_score,
            "subject_name": activity.subject.name if activity.subject else None,
            "teacher_name": activity.teacher.name if activity.teacher else None,
        }
        if activity
        else None,
    }


def grade_json(grade):
    return {
        "id": grade.id,
        "student_id": grade.student_id,
        "subject_id": grade.subject_id,
        "subject_name": grade.subject.name if grade.subject else None,
        "period": grade.period,
        "score": grade.score,
        "remediation_score": grade.remediation_score,
        "updated_at": _iso(grade.updated_at),
    }


def observation_json(observation):
    if observation is None:
        return None
    return {
        "id": observation.id,
        "student_id": observation.student_id,
        "teacher_id": observation.teacher_id,
        "text": observation.text,
        "created_at": _iso(observation.created_at),
    }


def condition_json(condition):
    return {
        "id": condition.id,
        "student_id": condition.student_id,
        "name": condition.name,
        "proof_status": condition.proof_status,
        "description": condition.description,
        "created_at": _iso(condition.created_at),
    }


def full_data_json(bundle):
    return {
        "student": student_json(bundle["student"]),
        "class": class_json(bundle["school_class"]) if bundle["school_class"] else None,
        "conditions": [condition_json(c) for c in bundle["conditions"]],
        "evaluations": [evaluation_json(e) for e in bundle["evaluations"]],
        "grades": [grade_json(g) for g in bundle["grades"]],
        "observations": [observation_json(o) for o in bundle["observations"]],
        "insights": [i.as_dict() for i in bundle["insights"]],
    }
