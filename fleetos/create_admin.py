# fleetos/create_admin.py
"""Bootstrap the first administrator: python -m fleetos.create_admin"""

from getpass import getpass
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from fleetos.database import session_scope, engine, Base
from fleetos import models
from fleetos.security import hash_password, is_password_strong_enough


def create_admin(db: Session, username: str, email: str, name: str, password: str) -> Optional[models.User]:
    """Returns the new admin, or None when the username or email is taken."""
    existing = db.query(models.User).filter(
        or_(models.User.username == username, models.User.email == email)
    ).first()
    if existing:
        print(f"[INFO] User already exists: id={existing.id}, username={existing.username}")
        return None

    admin = models.User(
        username=username,
        email=email,
        name=name,
        password=hash_password(password),
        role=models.UserRole.ADMIN,
        is_active=True,
    )
    db.add(admin)
    db.flush()
    print(f"[OK] Created admin user: id={admin.id}, username={admin.username}")
    return admin


def main() -> None:
    Base.metadata.create_all(bind=engine)

    username = input("Admin username: ")
    email = input("Admin email: ")
    name = input("Admin name: ")
    password = getpass("Admin password: ")
    if not is_password_strong_enough(password):
        print("[ERROR] Password needs 8+ characters with upper, lower, digit and special character.")
        raise SystemExit(1)

    with session_scope() as db:
        create_admin(db, username, email, name, password)


if __name__ == "__main__":
    main()
