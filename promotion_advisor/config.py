"""Configuration management for the Config Promotion Advisor."""

import os
from dataclasses import dataclass


@dataclass
class Config:
    """Runtime settings for the suggestion engine, CLI and API server."""

    # Suggestion Engine Configuration
    confidence_threshold: float = float(os.getenv("SUGGESTION_CONFIDENCE_THRESHOLD", "0.3"))
    glob_pattern: str = os.getenv("SUGGESTION_GLOB_PATTERN", "**/*.yaml")
    tool_name: str = os.getenv("SUGGESTION_TOOL_NAME", "helm-env-delta")

    # Logging Configuration
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # API Configuration
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "3000"))

    def validate(self) -> None:
        """Validate configuration and raise errors for invalid values."""
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError(
                f"confidence_threshold must be between 0 and 1, got {self.confidence_threshold}"
            )

        required_fields = [
            ("glob_pattern", self.glob_pattern),
            ("tool_name", self.tool_name),
        ]
        missing = [field for field, value in required_fields if not value]
        if missing:
            raise ValueError(f"Missing required configuration fields: {missing}")
