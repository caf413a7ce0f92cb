from os import getenv

class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://taskmanager:taskmanager@db:5432/taskmanager")
    APP_ENV = getenv("APP_ENV", "development")  # "production" masque le détail des erreurs 500
    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    TASKS_API_BASE = getenv("TASKS_API_BASE", "http://localhost:8000/api")

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

settings = Settings()
