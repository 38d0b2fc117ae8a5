"""Application configuration"""
from pydantic_settings import BaseSettings
from typing import List, Optional, Literal
from pathlib import Path


XLS_MIME_TYPE = "application/vnd.ms-excel"
XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class Settings(BaseSettings):
    """Settings from environment. No org-specific defaults."""

    DATABASE_URL: str = "sqlite:///./sheet_analytics.db"

    UPLOAD_DIR: str = "./uploads"
    MAX_UPLOAD_SIZE_MB: int = 10
    ALLOWED_MIME_TYPES: List[str] = [XLS_MIME_TYPE, XLSX_MIME_TYPE]

    AZURE_OPENAI_ENDPOINT: str = ""
    AZURE_OPENAI_KEY: str = ""
    AZURE_OPENAI_DEPLOYMENT: str = ""
    AZURE_OPENAI_API_VERSION: str = "2024-12-01-preview"

    AI_PROVIDER: Literal["openai", "azure", "none"] = "openai"
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None
    INSIGHT_MODEL: str = "gpt-4o-mini"
    INSIGHT_TIMEOUT_SECONDS: float = 60.0

    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    FRONTEND_URL: str = "http://localhost:3000"
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Sheet Analytics"
    VERSION: str = "1.0.0"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.MAX_UPLOAD_SIZE_MB <= 0:
            raise ValueError(
                f"MAX_UPLOAD_SIZE_MB must be positive. Got: {self.MAX_UPLOAD_SIZE_MB}"
            )

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def upload_path(self) -> Path:
        return Path(self.UPLOAD_DIR)

    @property
    def insights_enabled(self) -> bool:
        """True if a text-generation provider is configured"""
        if self.AI_PROVIDER == "azure":
            return bool(self.AZURE_OPENAI_ENDPOINT and self.AZURE_OPENAI_KEY)
        if self.AI_PROVIDER == "openai":
            return bool(self.OPENAI_API_KEY)
        return False

    @property
    def insight_model(self) -> str:
        """Model name, or the deployment name on Azure"""
        if self.AI_PROVIDER == "azure" and self.AZURE_OPENAI_DEPLOYMENT:
            return self.AZURE_OPENAI_DEPLOYMENT
        return self.INSIGHT_MODEL

    def ensure_upload_dir(self):
        """Create the upload directory if missing"""
        self.upload_path.mkdir(parents=True, exist_ok=True)

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
