"""
Application configuration from environment variables.
"""
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Application
    app_name: str = "Solar Site Layouts API"
    debug: bool = False
    
    # CORS - allowed origins for cross-origin requests
    cors_origins: list[str] = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Alternative dev server
    ]
    
    # Site file uploads
    max_upload_size_mb: int = 25
    
    # Layout defaults used when a request omits a parameter
    default_tilt_angle_deg: float = 20.0
    default_azimuth_deg: float = 180.0  # South-facing
    default_boundary_setback_m: float = 10.0
    
    # Render adapter
    render_padding_m: float = 50.0
    default_mounting_height_m: float = 0.5
    
    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            # Handle comma-separated string from environment variable
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v
    
    @property
    def max_upload_size_bytes(self) -> int:
        """Upload limit in bytes."""
        return self.max_upload_size_mb * 1024 * 1024
    
    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
