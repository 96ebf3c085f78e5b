"""initial school records schema

Revision ID: a41c9e2d7b10
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a41c9e2d7b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'school',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False, unique=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'teacher',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True, unique=True),
        sa.Column('registration', sa.String(length=50), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum('ADMIN', 'SUPERVISOR', 'PROFESOR', name='roleenum'), nullable=False),
        sa.Column('school_id', sa.Integer(), sa.ForeignKey('school.id'), nullable=True, index=True),
        sa.Column('active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'school_class',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('school_id', sa.Integer(), sa.ForeignKey('school.id'), nullable=False, index=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('school_id', 'name', name='uq_school_class_school_name'),
    )
    op.create_table(
        'subject',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('school_id', sa.Integer(), sa.ForeignKey('school.id'), nullable=False, index=True),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('school_id', 'name', name='uq_subject_school_name'),
    )
    op.create_table(
        'student',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('registration_number', sa.String(length=50), nullable=False, unique=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('school_class.id'), nullable=False, index=True),
        sa.Column('school_id', sa.Integer(), sa.ForeignKey('school.id'), nullable=False, index=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'activity',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('school_id', sa.Integer(), sa.ForeignKey('school.id'), nullable=False, index=True),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subject.id'), nullable=False, index=True),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('teacher.id'), nullable=False, index=True),
        sa.Column('kind', sa.String(length=100), nullable=False),
        sa.Column('location', sa.String(length=100), nullable=True),
        sa.Column('completion_time', sa.String(length=100), nullable=True),
        sa.Column('dynamics', sa.String(length=100), nullable=True),
        sa.Column('open_book', sa.Boolean(), nullable=True),
        sa.Column('creative_freedom', sa.Boolean(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('max_score', sa.Float(), nullable=False, server_default='10'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'evaluation',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('student.id'), nullable=False, index=True),
        sa.Column('activity_id', sa.Integer(), sa.ForeignKey('activity.id'), nullable=False, index=True),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('teacher.id'), nullable=False),
        sa.Column('score', sa.Float(), nullable=False),
        sa.Column('narrative', sa.Text(), nullable=True),
        sa.Column('on_time', sa.Boolean(), nullable=True),
        sa.Column('evaluated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('student_id', 'activity_id', name='uq_evaluation_student_activity'),
    )
    op.create_table(
        'bimonthly_grade',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('student.id'), nullable=False, index=True),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subject.id'), nullable=False, index=True),
        sa.Column('period', sa.Integer(), nullable=False),
        sa.Column('score', sa.Float(), nullable=False),
        sa.Column('remediation_score', sa.Float(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint(
            'student_id', 'subject_id', 'period', name='uq_bimonthly_grade_student_subject_period'
        ),
    )
    op.create_table(
        'observation',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('student.id'), nullable=False, index=True),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('teacher.id'), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'student_condition',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('student.id'), nullable=False, index=True),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('proof_status', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('student_id', 'name', name='uq_student_condition_student_name'),
    )
    op.create_table(
        'insight',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('student.id'), nullable=False, index=True),
        sa.Column('input_snapshot', sa.JSON(), nullable=False),
        sa.Column('prompt', sa.Text(), nullable=True),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('ai_model', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )


def downgrade():
    op.drop_table('insight')
    op.drop_table('student_condition')
    op.drop_table('observation')
    op.drop_table('bimonthly_grade')
    op.drop_table('evaluation')
    op.drop_table('activity')
    op.drop_table('student')
    op.drop_table('subject')
    op.drop_table('school_class')
    op.drop_table('teacher')
    op.drop_table('school')
    sa.Enum(name='roleenum').drop(op.get_bind(), checkfirst=True)
