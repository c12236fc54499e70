#!/usr/bin/env python3
"""Create the tables and seed the super-admin (and optionally a trainer).

    python -m gym_api.src.init_users --admin-email admin@example.com --admin-password ...

Credentials fall back to ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME.
"""
import argparse
import os
import sys
from typing import Tuple

from dotenv import load_dotenv
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

load_dotenv()

from ..core.database import SessionLocal, init_db
from ..core.security import get_password_hash
from ..models.orm import AdminUser, Trainer
from ..models.token import SUPER_ADMIN


def ensure_admin(db: Session, email: str, password: str, name: str) -> Tuple[AdminUser, bool]:
    """Create the super-admin if the email is not taken yet"""
    existing = db.query(AdminUser).filter(AdminUser.email == email).first()
    if existing:
        logger.info(f"Admin {email} already exists, skipped")
        return existing, False

    admin = AdminUser(email=email, name=name, role=SUPER_ADMIN, password_hash=get_password_hash(password))
    db.add(admin)
    db.commit()
    logger.info(f"Admin {email} created")
    return admin, True


def ensure_trainer(db: Session, email: str, password: str, name: str) -> Tuple[Trainer, bool]:
    """Create an active trainer if the email is not taken yet"""
    existing = db.query(Trainer).filter(Trainer.email == email).first()
    if existing:
        logger.info(f"Trainer {email} already exists, skipped")
        return existing, False

    trainer = Trainer(email=email, name=name, is_active=True, password_hash=get_password_hash(password))
    db.add(trainer)
    db.commit()
    logger.info(f"Trainer {email} created")
    return trainer, True


def initialize_database(args) -> int:
    if not args.admin_email or not args.admin_password:
        logger.error("Admin email and password are required (flags or ADMIN_EMAIL / ADMIN_PASSWORD)")
        return 1

    init_db()

    db = SessionLocal()
    try:
        ensure_admin(db, args.admin_email, args.admin_password, args.admin_name)
        if args.trainer_email and args.trainer_password:
            ensure_trainer(db, args.trainer_email, args.trainer_password, args.trainer_name)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database initialization failed: {e}")
        return 1
    finally:
        db.close()

    logger.info("Database initialization completed")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create tables and seed the gym admin account.")
    parser.add_argument("--admin-email", default=os.getenv("ADMIN_EMAIL"), help="Super-admin email")
    parser.add_argument("--admin-password", default=os.getenv("ADMIN_PASSWORD"), help="Super-admin password")
    parser.add_argument("--admin-name", default=os.getenv("ADMIN_NAME", "Administrator"), help="Super-admin display name")
    parser.add_argument("--trainer-email", help="Optional trainer to create")
    parser.add_argument("--trainer-password", help="Password for --trainer-email")
    parser.add_argument("--trainer-name", default="Trainer", help="Display name for --trainer-email")

    sys.exit(initialize_database(parser.parse_args()))
