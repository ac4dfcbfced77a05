"""
Idempotent seed-скрипт справочных данных (шаблоны курсов, экземпляры, люди).
Запуск:
  python seed.py --reset   # дропнуть и пересоздать БД + демо-данные
  python seed.py           # мягкое наполнение недостающих данных (idempotent)
"""
import argparse
import logging

from extensions import db
from models import CourseInstance, CourseTemplate, Person

log = logging.getLogger(__name__)

TEMPLATES = [
    ("T-514-VEFT", "Vefþjónustur"),
    ("T-111-PROG", "Forritun"),
    ("T-302-HONN", "Hönnun og smíði hugbúnaðar"),
]

# (course_id, semester_id)
INSTANCES = [
    ("T-514-VEFT", "20153"),
    ("T-111-PROG", "20153"),
    ("T-302-HONN", "20153"),
    ("T-111-PROG", "20161"),
]

PERSONS = [
    ("1234567890", "Daníel B. Sigurgeirsson"),
    ("1234567891", "Jón Jónsson"),
    ("1234567892", "Guðrún Guðmundsdóttir"),
]

def get_or_create(model, defaults=None, **filters):
    inst = db.session.query(model).filter_by(**filters).first()
    if inst:
        return inst, False
    data = dict(filters)
    if defaults:
        data.update(defaults)
    inst = model(**data)
    db.session.add(inst)
    return inst, True

def seed_reference_data() -> int:
    """Создаёт недостающие справочные записи. Возвращает число созданных."""
    created = 0
    for course_id, name in TEMPLATES:
        _, new = get_or_create(CourseTemplate, course_id=course_id, defaults={"name": name})
        created += new
    for ssn, name in PERSONS:
        _, new = get_or_create(Person, ssn=ssn, defaults={"name": name})
        created += new
    db.session.flush()
    for course_id, semester_id in INSTANCES:
        _, new = get_or_create(CourseInstance, course_id=course_id, semester_id=semester_id)
        created += new
    if created:
        db.session.commit()
        log.info("seeded %d reference rows", created)
    return created

def main():
    from app import create_app

    parser = argparse.ArgumentParser(description="Seed course reference data")
    parser.add_argument("--reset", action="store_true", help="drop & recreate all tables before seeding")
    args = parser.parse_args()

    app = create_app("dev")
    with app.app_context():
        if args.reset:
            db.drop_all()
        db.create_all()
        n = seed_reference_data()
        print(f"Seed done: {n} rows created.")

if __name__ == "__main__":
    main()
