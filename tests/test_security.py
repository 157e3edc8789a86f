from datetime import timedelta

import pytest
from fastapi import HTTPException
from jose import jwt

from app.core.config import settings
from app.core.security import create_access_token, get_current_user, require_roles
from app.db import models


def _add_user(db, **overrides):
    data = {"id": "user-1", "username": "gestor", "name": "Gestor", "role": "MANAGER", "status": "active"}
    data.update(overrides)
    user = models.User(**data)
    db.add(user)
    db.commit()
    return user


def test_access_token_carries_subject():
    token = create_access_token({"sub": "user-1"})
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["sub"] == "user-1"
    assert "exp" in payload


def test_current_user_from_token(db_session):
    _add_user(db_session)
    user = get_current_user(token=create_access_token({"sub": "user-1"}), db=db_session)
    assert user.username == "gestor"


def test_rejects_bad_and_expired_tokens(db_session):
    _add_user(db_session)
    expired = create_access_token({"sub": "user-1"}, expires_delta=timedelta(minutes=-5))
    for token in ("not-a-jwt", expired, create_access_token({"role": "ADMIN"})):
        with pytest.raises(HTTPException) as exc:
            get_current_user(token=token, db=db_session)
        assert exc.value.status_code == 401


def test_unknown_user(db_session):
    with pytest.raises(HTTPException) as exc:
        get_current_user(token=create_access_token({"sub": "ghost"}), db=db_session)
    assert exc.value.status_code == 401


def test_inactive_user(db_session):
    _add_user(db_session, status="blocked")
    with pytest.raises(HTTPException) as exc:
        get_current_user(token=create_access_token({"sub": "user-1"}), db=db_session)
    assert exc.value.status_code == 403
    assert exc.value.detail == "Usuario inativo"


def test_require_roles():
    guard = require_roles("ADMIN", "MANAGER")
    manager = models.User(id="u1", username="m", name="M", role="MANAGER", status="active")
    assert guard(user=manager) is manager
    with pytest.raises(HTTPException) as exc:
        guard(user=models.User(id="u2", username="d", name="D", role="DRIVER", status="active"))
    assert exc.value.status_code == 403
    assert exc.value.detail == "Permissao negada"
