# app/initial_data.py

import logging
from sqlalchemy.orm import Session
from app.database import SessionLocal, init_db
from app.crud.staff_member import create_staff_member
from app.core.exceptions import DuplicateStaffEmail, StaffValidationError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("OpsDash.InitialData")

INITIAL_STAFF = [
    {
        "name": "Operations Manager",
        "position": "Manager",
        "department": "Management",
        "email": "ops.manager@example.com",
    },
    {
        "name": "Support Technician",
        "position": "Technician",
        "department": "Customer Support",
        "email": "support.tech@example.com",
    },
]

def create_initial_staff(db: Session) -> int:
    """
    Создать стартовых сотрудников, если их ещё нет. Возвращает число созданных.
    """
    created = 0
    for member in INITIAL_STAFF:
        try:
            create_staff_member(db, member)
            created += 1
            logger.info(f"Staff member '{member['email']}' created.")
        except DuplicateStaffEmail:
            logger.info(f"Staff member '{member['email']}' already exists. No action taken.")
        except StaffValidationError as e:
            logger.error(f"Failed to create staff member '{member['email']}': {e}")
    return created

def main() -> None:
    logger.info("Initializing database and seed data...")
    init_db()
    db = SessionLocal()
    try:
        create_initial_staff(db)
    finally:
        db.close()
    logger.info("Finished initial data setup.")

if __name__ == "__main__":
    from dotenv import load_dotenv
    load_dotenv()

    main()
