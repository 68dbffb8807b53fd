# venue_admin/core/config.py
from pydantic_settings import BaseSettings
from pydantic import BaseModel, Field, SecretStr
from typing import List, Optional
from functools import lru_cache


class DataBaseConfig(BaseModel):
    DB_HOST: str = Field(..., description="Database host")
    DB_PORT: int = Field(5432, description="Database port")
    DB_NAME: str = Field(..., description="Database name")
    DB_USER: str = Field(..., description="Database user")
    DB_PASSWORD: SecretStr = Field(..., description="Database password")
    DB_ECHO: bool = Field(False, description="Enable SQL echo")
    DB_POOL_SIZE: int = Field(5, description="Database pool size")
    DB_MAX_OVERFLOW: int = Field(10, description="Database max overflow")

    @property
    def DATABASE_URL(self) -> str:
        return f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD.get_secret_value()}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    naming_convention: dict[str, str] = {
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_N_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }


class MinIOConfig(BaseModel):
    MINIO_ENDPOINT: str = Field(..., description="MinIO endpoint")
    MINIO_ACCESS_KEY: str = Field(..., description="MinIO access key")
    MINIO_SECRET_KEY: SecretStr = Field(..., description="MinIO secret key")
    MINIO_SECURE: bool = Field(False, description="Use HTTPS for MinIO")
    MINIO_BUCKET_NAME: str = Field("images", description="Default bucket for uploads")
    MINIO_PUBLIC_URL: Optional[str] = Field(
        None, description="Public base URL for stored objects (CDN or proxy), defaults to the endpoint"
    )

    @property
    def minio_url(self) -> str:
        protocol = "https" if self.MINIO_SECURE else "http"
        return f"{protocol}://{self.MINIO_ENDPOINT}"

    @property
    def public_base_url(self) -> str:
        return (self.MINIO_PUBLIC_URL or self.minio_url).rstrip("/")


class UploadConfig(BaseModel):
    UPLOAD_MAX_SIZE_MB: float = Field(5, description="Default upload size limit in MB")
    UPLOAD_ALLOWED_TYPES: List[str] = Field(
        default_factory=lambda: ["image/jpeg", "image/png", "image/webp", "image/gif"],
        description="Default accepted MIME types",
    )
    UPLOAD_CACHE_CONTROL: str = Field("max-age=3600", description="Cache-Control for stored objects")


class SecurityConfig(BaseModel):
    JWT_SECRET_KEY: SecretStr = Field(..., description="JWT secret key")
    JWT_ALGORITHM: str = Field("HS256", description="JWT algorithm")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(30, description="Access token expiration")
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = Field(7, description="Refresh token expiration")


class Settings(BaseSettings):
    app_name: str = Field("Venue Admin", description="Application name")
    debug: bool = Field(False, description="Debug mode")
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://localhost:3000",
        ],
        description="CORS origins"
    )
    list_cache_ttl: float = Field(30.0, description="Seconds a cached list page stays fresh")
    list_cache_max_entries: int = Field(1000, description="Most list pages kept in the in-process cache")
    default_page_size: int = Field(10, description="Default list page size")
    max_page_size: int = Field(100, description="Largest allowed list page size")

    db: DataBaseConfig
    minio: MinIOConfig
    security: SecurityConfig
    uploads: UploadConfig = Field(default_factory=UploadConfig)

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        case_sensitive = False
        env_nested_delimiter = '__'


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance"""
    return Settings()

settings = get_settings()
