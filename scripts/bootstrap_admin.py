import os

from app.core.security import create_access_token
from app.db import models
from app.db.session import SessionLocal


def main() -> None:
    username = os.getenv("ADMIN_BOOTSTRAP_USERNAME")
    name = os.getenv("ADMIN_BOOTSTRAP_NAME") or "Administrador"
    if not username:
        raise SystemExit("ADMIN_BOOTSTRAP_USERNAME nao definido.")
    username = username.strip().lower()

    db = SessionLocal()
    try:
        user = db.query(models.User).filter(models.User.username == username).first()
        if not user:
            user = models.User(username=username, name=name, role="ADMIN", status="active")
            db.add(user)
        else:
            user.role = "ADMIN"
            user.status = "active"
        db.commit()
        print(f"Admin ativo: {user.username}")
        print(f"Token: {create_access_token({'sub': user.id})}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
