"""
Configuration settings for the document analyzer.
Loads environment variables and provides application-wide settings.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, List

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Groq Configuration (OpenAI-compatible chat completions)
    GROQ_API_KEY: str = ""
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"
    GROQ_MODEL: str = "llama-3.3-70b-versatile"
    GROQ_TIMEOUT: int = 60  # seconds

    # Analysis Configuration
    ANALYSIS_CHAR_LIMIT: int = 15000  # characters sent to the model
    ANALYSIS_TEMPERATURE: float = 0.4
    ANALYSIS_MAX_TOKENS: int = 2000

    # Chat Configuration
    CHAT_CONTEXT_CHAR_LIMIT: int = 10000  # document characters in the system message
    CHAT_TEMPERATURE: float = 0.7
    CHAT_MAX_TOKENS: int = 1500

    # Image Generation (Pollinations, no API key)
    IMAGE_BASE_URL: str = "https://image.pollinations.ai"
    IMAGE_WIDTH: int = 1024
    IMAGE_HEIGHT: int = 1024

    # Upload Configuration
    MAX_FILE_SIZE: int = 20 * 1024 * 1024  # 20 MB
    SUPPORTED_MIME_TYPES: Dict[str, str] = {
        ".pdf": PDF_MIME_TYPE,
        ".docx": DOCX_MIME_TYPE,
    }

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:3001"

    # Client Configuration
    API_BASE_URL: str = "http://localhost:8000"
    HISTORY_FILE: str = "~/.docanalyzer/history.json"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into a list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    def is_supported_mime_type(self, mime_type: str) -> bool:
        """Return True if *mime_type* is one of the accepted document types."""
        return mime_type in self.SUPPORTED_MIME_TYPES.values()


# Global settings instance
settings = Settings()
