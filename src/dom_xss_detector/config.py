"""
Configuration module for managing environment variables and settings.
"""

import os
from pathlib import Path

from dotenv import load_dotenv


class Config:
    """Configuration manager for the dynamic emulation settings."""

    def __init__(self):
        """Initialize configuration and load environment variables."""
        env_path = Path(__file__).parent.parent.parent / ".env"
        load_dotenv(env_path)

        # Time budget for one emulation run, in seconds
        self.emulator_timeout: float = float(os.getenv("DOMTAINT_EMULATOR_TIMEOUT", "5"))

        # Interpreter heap limit, in megabytes
        self.emulator_memory_mb: int = int(os.getenv("DOMTAINT_EMULATOR_MEMORY_MB", "64"))

    @property
    def emulator_memory_limit(self) -> int:
        """Interpreter heap limit in bytes."""
        return self.emulator_memory_mb * 1024 * 1024

    def validate(self) -> dict:
        """
        Check that the configured settings are usable.

        Returns:
            Dictionary with validation results
        """
        missing = []
        warnings = []

        if self.emulator_timeout <= 0:
            missing.append("DOMTAINT_EMULATOR_TIMEOUT must be a positive number of seconds")
        elif self.emulator_timeout > 60:
            warnings.append(
                f"DOMTAINT_EMULATOR_TIMEOUT is {self.emulator_timeout}s - long-running scripts will stall directory scans"
            )

        if self.emulator_memory_mb <= 0:
            missing.append("DOMTAINT_EMULATOR_MEMORY_MB must be a positive number of megabytes")

        return {
            "valid": len(missing) == 0,
            "missing": missing,
            "warnings": warnings,
        }


# Global config instance
config = Config()
