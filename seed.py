from decimal import Decimal
from database import SessionLocal, engine, Base
from models.masters import ClassMaster, Parent
from models.students import Student
from models.fee_models import Payment, FinanceSummary
from constants import StudentStatus

PARENTS = [
    {"name": "Ahmed Hassan", "phone": "+252-61-234-5678", "address": "Hodan District, Mogadishu"},
    {"name": "Fatima Mohamed", "phone": "+252-61-345-6789", "address": "Wadajir District, Mogadishu"},
    {"name": "Omar Ali", "phone": "+252-61-456-7890", "address": "Karan District, Mogadishu"},
    {"name": "Amina Abdi", "phone": "+252-61-567-8901", "address": "Dharkenley District, Mogadishu"},
    {"name": "Hassan Ibrahim", "phone": "+252-61-678-9012", "address": "Shangani District, Mogadishu"},
]

CLASSES = [
    {"name": "Grade 1", "description": "First grade elementary students"},
    {"name": "Grade 2", "description": "Second grade elementary students"},
    {"name": "Grade 3", "description": "Third grade elementary students"},
    {"name": "Kindergarten", "description": "Pre-school kindergarten class"},
]

# (name, parent, class, fee, discount, status)
STUDENTS = [
    ("Abdirahman Ahmed", "Ahmed Hassan", "Grade 1", "50", "5", StudentStatus.ACTIVE),
    ("Maryam Fatima", "Fatima Mohamed", "Grade 1", "50", "0", StudentStatus.ACTIVE),
    ("Mohamed Omar", "Omar Ali", "Grade 2", "55", "10", StudentStatus.ACTIVE),
    ("Halima Amina", "Amina Abdi", "Grade 3", "60", "0", StudentStatus.ACTIVE),
    ("Ibrahim Hassan", "Hassan Ibrahim", "Kindergarten", "45", "5", StudentStatus.ACTIVE),
    ("Khadija Ali", "Ahmed Hassan", "Grade 2", "55", "0", StudentStatus.INACTIVE),
    ("Yusuf Mohamed", "Fatima Mohamed", "Grade 3", "60", "10", StudentStatus.ACTIVE),
    ("Aisha Omar", "Omar Ali", "Kindergarten", "45", "0", StudentStatus.ACTIVE),
]


def seed_data(db):
    print("🌱 Seeding roster...")

    # 1. PARENTS
    parent_ids = {}
    for p in PARENTS:
        exists = db.query(Parent).filter_by(name=p["name"]).first()
        if not exists:
            exists = Parent(**p)
            db.add(exists)
            db.flush()
            print(f"✅ Added parent: {p['name']}")
        parent_ids[p["name"]] = exists.id

    # 2. CLASSES
    class_ids = {}
    for c in CLASSES:
        exists = db.query(ClassMaster).filter_by(class_name=c["name"]).first()
        if not exists:
            exists = ClassMaster(class_name=c["name"], description=c["description"])
            db.add(exists)
            db.flush()
            print(f"✅ Added class: {c['name']}")
        class_ids[c["name"]] = exists.id

    # 3. STUDENTS
    for name, parent, cls, fee, discount, status in STUDENTS:
        exists = db.query(Student).filter_by(student_name=name).first()
        if not exists:
            db.add(Student(
                student_name=name,
                parent_id=parent_ids[parent],
                class_id=class_ids[cls],
                fee=Decimal(fee),
                discount=Decimal(discount),
                status=status.value,
            ))
            print(f"  └── Student {name} added to {cls}")
        else:
            print(f"ℹ️  Exists: {name}")

    db.commit()
    print("\n🎉 Roster seeded. Generate fees from POST /api/v1/finance/generate")


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed_data(session)
    finally:
        session.close()
