from app.core.config import DEFAULT_CORS_ORIGINS, DEFAULT_SECRET_KEY, Settings


def test_defaults():
    cfg = Settings(env={})
    assert cfg.APP_NAME == "Fleet Operations API"
    assert cfg.SECRET_KEY == DEFAULT_SECRET_KEY
    assert cfg.ACCESS_TOKEN_EXPIRE_HOURS == 8
    assert cfg.TIMELINE_FETCH_WORKERS == 3
    assert cfg.SQLALCHEMY_DATABASE_URI.startswith("sqlite:///")
    assert cfg.BACKEND_CORS_ORIGINS == DEFAULT_CORS_ORIGINS
    assert cfg.production_warnings() == []


def test_overrides_from_env():
    cfg = Settings(
        env={
            "TIMELINE_FETCH_WORKERS": "0",
            "ACCESS_TOKEN_EXPIRE_HOURS": " 12 ",
            "BACKEND_CORS_ORIGINS": "https://frota.example.com, ,http://localhost:4200",
        }
    )
    assert cfg.TIMELINE_FETCH_WORKERS == 1
    assert cfg.ACCESS_TOKEN_EXPIRE_HOURS == 12
    assert cfg.BACKEND_CORS_ORIGINS == ["https://frota.example.com", "http://localhost:4200"]


def test_production_warnings():
    risky = Settings(env={"ENV": "Production"})
    assert len(risky.production_warnings()) == 2

    hardened = Settings(
        env={
            "ENV": "production",
            "SECRET_KEY": "s3cr3t",
            "SQLALCHEMY_DATABASE_URI": "postgresql://fleet@db/fleet",
        }
    )
    assert hardened.production_warnings() == []
