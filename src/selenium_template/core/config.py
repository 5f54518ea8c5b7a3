from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field, validator
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    # Driver configuration file (YAML); missing file means built-in defaults
    DRIVER_CONFIG_PATH: str = Field(default="config/driver-config.yaml", description="Path to the YAML driver configuration")

    # Environment overrides applied on top of the YAML configuration
    BROWSER: Optional[str] = Field(default=None, description="Browser override: 'chrome', 'edge' or 'firefox'")
    HEADLESS: Optional[bool] = Field(default=None, description="Headless mode override")

    # Global reporting switch; when False no step is ever reported
    REPORTING_ENABLED: bool = Field(default=True, description="Enable/disable report generation globally")

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO", description="Log level for the selenium_template loggers")
    LOG_DIR: str = Field(default="logs", description="Directory for rotating log files")

    @validator('BROWSER')
    def validate_browser(cls, v):
        """Validate that BROWSER is one of the supported browsers."""
        if v is None:
            return v
        if v.lower() not in ['chrome', 'edge', 'firefox']:
            raise ValueError(f"BROWSER must be 'chrome', 'edge' or 'firefox', got '{v}'")
        return v.lower()

    @validator('LOG_LEVEL')
    def validate_log_level(cls, v):
        """Validate that LOG_LEVEL is a standard logging level name."""
        if v.upper() not in ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']:
            raise ValueError(f"LOG_LEVEL must be a standard logging level, got '{v}'")
        return v.upper()

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = 'allow'  # Allow extra fields from .env file

settings = Settings()
