# src/fossil_store/config/settings.py
import logging
from typing import Optional, Dict, Any
from pydantic import Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """
    Single source of truth for the storage backend settings.
    
    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)
    
    Usage:
        from fossil_store.config import get_settings
        settings = get_settings()
        bucket_name = settings.s3_bucket_name
    """
    
    # AWS Core Settings
    aws_region: str = Field(
        default="us-east-1",
        alias="AWS_DEFAULT_REGION"
    )
    
    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID"
    )
    
    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY"
    )
    
    aws_endpoint_url: Optional[str] = Field(
        default=None,
        alias="AWS_ENDPOINT_URL",
        description="Custom endpoint for S3-compatible stores (MinIO, moto server, B2 S3 API)"
    )
    
    # S3 Configuration
    s3_bucket_name: str = Field(
        default="fossil-storage",
        description="Versioned S3 bucket holding chunks and snapshots"
    )
    
    # Worker pool
    storage_threads: int = Field(
        default=1,
        description="Number of worker threads, one pooled S3 session each"
    )
    
    # Transfer limits (KB/s, 0 means unlimited)
    download_rate_limit: int = Field(
        default=0,
        description="Global download budget in KB/s shared evenly by all workers"
    )
    
    upload_rate_limit: int = Field(
        default=0,
        description="Global upload budget in KB/s shared evenly by all workers"
    )
    
    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    
    @validator('storage_threads')
    def validate_storage_threads(cls, v):
        """A pool needs at least one session."""
        if v < 1:
            raise ValueError(f"Invalid storage_threads: {v}. Must be at least 1")
        return v
    
    @validator('download_rate_limit', 'upload_rate_limit')
    def validate_rate_limit(cls, v):
        if v < 0:
            raise ValueError(f"Invalid rate limit: {v}. Use 0 for unlimited")
        return v
    
    @validator('log_level', pre=True)
    def normalize_log_level(cls, v):
        """Normalize and validate the logging level name."""
        level = str(v).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid log_level: {v}")
        return level
    
    @property
    def client_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for creating a boto3 S3 client."""
        kwargs: Dict[str, Any] = {'region_name': self.aws_region}
        if self.aws_access_key_id:
            kwargs['aws_access_key_id'] = self.aws_access_key_id
        if self.aws_secret_access_key:
            kwargs['aws_secret_access_key'] = self.aws_secret_access_key
        if self.aws_endpoint_url:
            kwargs['endpoint_url'] = self.aws_endpoint_url
        return kwargs

    def get_environment_dict(self) -> dict:
        """Get configuration as a dictionary of environment variables.
        
        Secrets are masked.
        """
        return {
            'S3_BUCKET_NAME': self.s3_bucket_name,
            'AWS_DEFAULT_REGION': self.aws_region,
            'AWS_ENDPOINT_URL': self.aws_endpoint_url or '',
            'AWS_ACCESS_KEY_ID': '****' if self.aws_access_key_id else '',
            'AWS_SECRET_ACCESS_KEY': '****' if self.aws_secret_access_key else '',
            'STORAGE_THREADS': str(self.storage_threads),
            'DOWNLOAD_RATE_LIMIT': str(self.download_rate_limit),
            'UPLOAD_RATE_LIMIT': str(self.upload_rate_limit),
            'LOG_LEVEL': self.log_level,
        }

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
