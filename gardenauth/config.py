"""Garden Auth Server Configuration."""

import secrets
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    server_name: str = "Garden Auth"
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False

    # Paths
    data_dir: Path = Path.home() / "gardenauth" / "data"

    # Database
    db_path: Path = Path.home() / "gardenauth" / "data" / "gardenauth.db"

    # Device provisioning
    signing_key: str = ""
    admin_password: str = ""

    # JWT
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    token_lifetime_seconds: int = 3600  # 1 hour
    token_refresh_threshold_seconds: int = 2700  # 45 minutes
    token_response_annotated: bool = False  # token:secondsLeft:cached|new

    # Gardens
    max_gardens_per_account: int = 10
    sync_grace_seconds: int = 300  # 5 minutes

    model_config = {"env_prefix": "GARDEN_"}

    def ensure_dirs(self) -> None:
        """Create all required directories."""
        for d in [self.data_dir, self.db_path.parent]:
            d.mkdir(parents=True, exist_ok=True)

    def ensure_secrets(self) -> None:
        """Generate the JWT secret if not set, persist it so tokens survive restarts."""
        secrets_file = self.data_dir / ".secrets"
        saved = {}
        if secrets_file.exists():
            for line in secrets_file.read_text().strip().splitlines():
                if "=" in line:
                    k, v = line.split("=", 1)
                    saved[k.strip()] = v.strip()

        if not self.jwt_secret:
            self.jwt_secret = saved.get("jwt_secret", "") or secrets.token_urlsafe(32)

        secrets_file.write_text(f"jwt_secret={self.jwt_secret}\n")

    def require_secrets(self) -> None:
        """Fail fast when the provisioning secrets are missing.

        Device keys are derived from the signing key, so a generated value
        would invalidate every provisioned controller.
        """
        missing = [
            name for name, value in (
                ("GARDEN_SIGNING_KEY", self.signing_key),
                ("GARDEN_ADMIN_PASSWORD", self.admin_password),
            )
            if not value
        ]
        if missing:
            raise RuntimeError(f"Missing required configuration: {', '.join(missing)}")


settings = Settings()
settings.ensure_dirs()
settings.ensure_secrets()


def get_settings() -> Settings:
    """FastAPI dependency: the process-wide settings object."""
    return settings
