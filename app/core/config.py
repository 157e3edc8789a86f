import os
from functools import lru_cache
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent.parent
DEFAULT_SECRET_KEY = "dev-secret-change-me"
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def _env_int(env: Mapping[str, str], name: str, default: int, minimum: int = 0) -> int:
    raw = (env.get(name) or "").strip()
    return max(minimum, int(raw)) if raw else default


def _env_list(env: Mapping[str, str], name: str, default: List[str]) -> List[str]:
    raw = env.get(name)
    if not raw:
        return list(default)
    return [part.strip() for part in raw.split(",") if part.strip()]


class Settings:
    def __init__(self, env: Optional[Mapping[str, str]] = None) -> None:
        env = os.environ if env is None else env
        self.APP_NAME: str = env.get("APP_NAME", "Fleet Operations API")
        self.ENV: str = env.get("ENV", "development")

        # auth
        self.SECRET_KEY: str = env.get("SECRET_KEY", DEFAULT_SECRET_KEY)
        self.ALGORITHM: str = env.get("ALGORITHM", "HS256")
        self.ACCESS_TOKEN_EXPIRE_HOURS: int = _env_int(env, "ACCESS_TOKEN_EXPIRE_HOURS", 8, minimum=1)

        self.SQLALCHEMY_DATABASE_URI: str = env.get(
            "SQLALCHEMY_DATABASE_URI",
            f"sqlite:///{(BASE_DIR / 'fleet.db').as_posix()}",
        )
        self.BACKEND_CORS_ORIGINS: List[str] = _env_list(env, "BACKEND_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)

        # 1 = timeline sources are read one after another
        self.TIMELINE_FETCH_WORKERS: int = _env_int(env, "TIMELINE_FETCH_WORKERS", 3, minimum=1)

    @property
    def is_production(self) -> bool:
        return self.ENV.lower() == "production"

    def production_warnings(self) -> List[str]:
        if not self.is_production:
            return []
        warnings = []
        if self.SECRET_KEY == DEFAULT_SECRET_KEY:
            warnings.append("SECRET_KEY esta usando valor padrao em producao.")
        if self.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
            warnings.append("SQLALCHEMY_DATABASE_URI aponta para SQLite em producao.")
        return warnings


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
