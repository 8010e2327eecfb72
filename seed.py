from loguru import logger
from sqlmodel import Session, select

from app.core.config import settings
from app.db.core import engine, create_db_and_tables
from app.db.schema import User, UserRole
from app.services.password import get_password_hash


def seed_admin(session: Session, email: str, password: str, name: str) -> User:
    """
    Idempotent: creates the administrator, or promotes an existing account
    with the same email. An existing password is never overwritten.
    """
    logger.info("--- Seeding Administrator ---")
    email = email.strip().lower()

    user = session.exec(select(User).where(User.email == email)).first()

    if not user:
        if not password:
            raise ValueError(
                "ADMIN_PASSWORD must be set to create the administrator.")
        user = User(
            email=email,
            hashed_password=get_password_hash(password),
            name=name,
            role=UserRole.ADMINISTRATOR,
            is_active=True
        )
        session.add(user)
        logger.info(f"Created Administrator: {email}")
    elif user.role != UserRole.ADMINISTRATOR:
        user.role = UserRole.ADMINISTRATOR
        session.add(user)
        logger.info(f"Promoted existing user to Administrator: {email}")
    else:
        logger.info(f"Existing Administrator: {email}")

    session.flush()
    return user


def main():
    # Ensure tables exist (if not using Alembic)
    create_db_and_tables()

    with Session(engine) as session:
        try:
            seed_admin(
                session,
                email=settings.admin_email,
                password=settings.admin_password,
                name=settings.admin_name
            )

            session.commit()
            logger.info("Database seeding completed successfully.")

        except Exception as e:
            session.rollback()
            logger.error(f"Seeding failed: {e}")
            raise e


if __name__ == "__main__":
    main()
