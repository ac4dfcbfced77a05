"""course enrollment tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

MAIN_TEACHER_ONLY = sa.text("type = 'MAIN_TEACHER'")

def upgrade():
    teacher_type = sa.Enum('MAIN_TEACHER', 'ASSISTANT_TEACHER', name='teacher_type')

    op.create_table('person',
        sa.Column('ssn', sa.String(20), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
    )

    op.create_table('course_template',
        sa.Column('course_id', sa.String(50), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
    )

    op.create_table('course_instance',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('course_id', sa.String(50),
                  sa.ForeignKey('course_template.course_id', ondelete='RESTRICT'), nullable=False),
        sa.Column('semester_id', sa.String(10), nullable=False),
    )
    op.create_index('ix_course_instance_semester_id', 'course_instance', ['semester_id'])

    op.create_table('teacher_registration',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ssn', sa.String(20), sa.ForeignKey('person.ssn', ondelete='CASCADE'), nullable=False),
        sa.Column('course_instance_id', sa.Integer(),
                  sa.ForeignKey('course_instance.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', teacher_type, nullable=False),
        sa.UniqueConstraint('ssn', 'course_instance_id', name='uq_teacher_registration_person_course'),
    )
    op.create_index('ix_teacher_registration_course_instance_id', 'teacher_registration', ['course_instance_id'])
    op.create_index(
        'uq_teacher_registration_main_teacher', 'teacher_registration', ['course_instance_id'],
        unique=True, sqlite_where=MAIN_TEACHER_ONLY, postgresql_where=MAIN_TEACHER_ONLY,
    )

def downgrade():
    op.drop_index('uq_teacher_registration_main_teacher', table_name='teacher_registration')
    op.drop_index('ix_teacher_registration_course_instance_id', table_name='teacher_registration')
    op.drop_table('teacher_registration')
    op.drop_index('ix_course_instance_semester_id', table_name='course_instance')
    op.drop_table('course_instance')
    op.drop_table('course_template')
    op.drop_table('person')
    sa.Enum(name='teacher_type').drop(op.get_bind(), checkfirst=True)
