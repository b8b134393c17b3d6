"""
Demo data seed.

Creates ten oncology hospitals (one Oncology department each), one doctor
per hospital and a sample patient. Every seeded account uses the password
`password123`. Skipped when any hospital already exists.

Run directly with:
    python -m doctorpath.db.seed
"""
from sqlalchemy.orm import Session

from doctorpath.utils import get_logger, setup_logging
from .storage import Storage

logger = get_logger(__name__)

DEMO_PASSWORD = "password123"

HOSPITALS = [
    {"name": "Shaukat Khanum Memorial Cancer Hospital", "branch_code": "SKMCH-LHR", "city": "Lahore",
     "address": "7A Block R-3, M.A. Johar Town", "phone": "+92-42-35905000"},
    {"name": "Aga Khan University Hospital", "branch_code": "AKUH-KHI", "city": "Karachi",
     "address": "Stadium Road, P.O. Box 3500", "phone": "+92-21-111-911-911"},
    {"name": "Shifa International Hospital", "branch_code": "SHIFA-ISB", "city": "Islamabad",
     "address": "Sector H-8/4", "phone": "+92-51-846-4646"},
    {"name": "Pakistan Institute of Medical Sciences (PIMS)", "branch_code": "PIMS-ISB", "city": "Islamabad",
     "address": "G-8/3, Islamabad", "phone": "+92-51-9261170"},
    {"name": "Jinnah Postgraduate Medical Centre (JPMC)", "branch_code": "JPMC-KHI", "city": "Karachi",
     "address": "Rafiqui Shaheed Road", "phone": "+92-21-99201300"},
    {"name": "Combined Military Hospital (CMH)", "branch_code": "CMH-RWP", "city": "Rawalpindi",
     "address": "The Mall Road", "phone": "+92-51-9270614"},
    {"name": "Liaquat National Hospital", "branch_code": "LNH-KHI", "city": "Karachi",
     "address": "Stadium Road", "phone": "+92-21-111-456-456"},
    {"name": "Services Hospital", "branch_code": "SHL-LHR", "city": "Lahore",
     "address": "Jail Road", "phone": "+92-42-99203402"},
    {"name": "Lady Reading Hospital", "branch_code": "LRH-PSH", "city": "Peshawar",
     "address": "Hospital Road", "phone": "+92-91-9211430"},
    {"name": "Indus Hospital", "branch_code": "IH-KHI", "city": "Karachi",
     "address": "Plot C-76, Sector 31/5, Korangi Crossing", "phone": "+92-21-111-111-880"},
]

# (name, email, specialization) in hospital order
DOCTORS = [
    ("Dr. Ali Raza", "ali.raza@skmch.org", "Liver Specialist"),
    ("Dr. Ayesha Khan", "ayesha.khan@akuh.org", "Lung Specialist"),
    ("Dr. Bilal Ahmed", "bilal.ahmed@shifa.com", "Oncologist"),
    ("Dr. Zainab Malik", "zainab.malik@pims.gov.pk", "Oncologist"),
    ("Dr. Usman Tariq", "usman.tariq@jpmc.edu.pk", "Oncologist"),
    ("Dr. Fatima Yusuf", "fatima.yusuf@cmh.com", "Oncologist"),
    ("Dr. Hamza Farooq", "hamza.farooq@lnh.org.pk", "Oncologist"),
    ("Dr. Sana Mir", "sana.mir@services.gov.pk", "Oncologist"),
    ("Dr. Taimoor Hassan", "taimoor.hassan@lrh.gov.pk", "Oncologist"),
    ("Dr. Hira Javed", "hira.javed@indushospital.org.pk", "Oncologist"),
]

SAMPLE_PATIENT = {
    "name": "Muhammad Ahmed",
    "email": "ahmed.muhammad@example.com",
    "phone": "+92-300-1234567",
    "age": 45,
    "gender": "Male",
    "address": "House 123, Block A, Gulberg III, Lahore",
    "blood_group": "O+",
}


def seed_database(db: Session) -> bool:
    """Insert the demo data set. Returns False when the database was already seeded."""
    from doctorpath.services.auth import hash_password

    storage = Storage(db)
    if storage.count_hospitals() > 0:
        logger.info("Database already seeded, skipping")
        return False

    password_hash = hash_password(DEMO_PASSWORD)

    for hospital_data, (name, email, specialization) in zip(HOSPITALS, DOCTORS):
        hospital = storage.create_hospital(**hospital_data)
        department = storage.create_department(
            hospital_id=hospital.id,
            name="Oncology",
            description="Cancer treatment and care department",
        )
        user = storage.create_user(
            name=name, email=email, password_hash=password_hash,
            role="doctor", phone="+92-300-0000000",
        )
        storage.create_doctor(
            user_id=user.id,
            specialization=specialization,
            experience="10+ years",
            qualifications="MBBS, FCPS (Oncology)",
            hospital_id=hospital.id,
            department_id=department.id,
        )

    patient = dict(SAMPLE_PATIENT)
    user = storage.create_user(
        name=patient.pop("name"), email=patient.pop("email"), phone=patient.pop("phone"),
        password_hash=password_hash, role="patient",
    )
    storage.create_patient(user_id=user.id, **patient)

    logger.info(
        f"Seeded {len(HOSPITALS)} hospitals, {len(DOCTORS)} doctors and 1 patient "
        f"(login: {SAMPLE_PATIENT['email']} / {DOCTORS[0][1]}, password {DEMO_PASSWORD})"
    )
    return True


if __name__ == "__main__":
    from doctorpath.config import settings
    from .session import SessionLocal, init_db

    setup_logging(settings.log_level, settings.log_file)
    init_db()
    with SessionLocal() as db:
        seed_database(db)
