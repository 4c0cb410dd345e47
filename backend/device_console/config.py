import os
from datetime import timedelta
from pathlib import Path

DEFAULT_DATABASE_URL = "sqlite:///data/device_console.db"


class Config:
    # Durée fixe d'une session admin, pas de renouvellement
    SESSION_LIFETIME = timedelta(hours=24)

    def __init__(self, admin_password, api_password, database_url=DEFAULT_DATABASE_URL,
                 cors_origins=None, log_level="INFO", debug=False, frontend_dist=None):
        if not admin_password or not api_password:
            raise ValueError("admin_password and api_password must be set")

        self.admin_password = admin_password
        self.api_password = api_password

        # PostgreSQL sur Render, SQLite en local
        if database_url.startswith("postgres://"):
            database_url = database_url.replace("postgres://", "postgresql://", 1)
        self.database_url = database_url

        self.session_lifetime = self.SESSION_LIFETIME
        self.cors_origins = cors_origins or ["*"]
        self.log_level = log_level.upper()
        self.debug = debug
        self.frontend_dist = Path(frontend_dist) if frontend_dist else None

    @classmethod
    def from_env(cls, environ=None):
        """Build the configuration from environment variables.

        Local-development fallbacks for the two secrets live here only.
        """
        env = os.environ if environ is None else environ
        origins = [o.strip() for o in env.get("CORS_ORIGINS", "*").split(",") if o.strip()]
        return cls(
            admin_password=env.get("ADMIN_PASSWORD", "admin123"),
            api_password=env.get("API_PASSWORD", "panda"),
            database_url=env.get("DATABASE_URL", DEFAULT_DATABASE_URL),
            cors_origins=origins,
            log_level=env.get("LOG_LEVEL", "INFO"),
            debug=env.get("DEBUG", "False").lower() == "true",
            frontend_dist=env.get("FRONTEND_DIST") or None,
        )

    def __repr__(self):
        # Jamais les mots de passe
        return f"<Config database_url={self.database_url!r} log_level={self.log_level!r}>"
