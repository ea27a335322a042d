from typing import List, Optional
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from pathlib import Path
from fastapi import Request

ROOT_DIR = Path(__file__).resolve().parent.parent.parent

load_dotenv(Path(ROOT_DIR) / '.env')

DEFAULT_ALLOWED_ORIGINS = [
    "https://superflixheroes.netlify.app",
    "http://localhost:1234",
    "http://localhost:4200",
    "https://movie-api-k8molony.vercel.app",
    "https://k8molony.github.io",
    "https://github.com/k8molony",
]

class Settings(BaseSettings):
    PORT: int = 8080

    FIREBASE_PROJECT_ID: str = "superflix"
    FIREBASE_CREDS_PATH: Optional[str] = None
    # Used only when no service account is configured
    FIRESTORE_EMULATOR_HOST: str = "localhost:8200"
    USERS_COLLECTION: str = "users"
    MOVIES_COLLECTION: str = "movies"

    JWT_SECRET: str = "your_jwt_secret"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_DAYS: int = 7

    ALLOWED_ORIGINS: List[str] = DEFAULT_ALLOWED_ORIGINS

    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    @property
    def FIREBASE_CREDS_PATH_ABSOLUTE(self) -> Optional[Path]:
        """Returns absolute path to Firebase credentials file"""
        if not self.FIREBASE_CREDS_PATH:
            return None
        return ROOT_DIR / self.FIREBASE_CREDS_PATH

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()


def get_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings
