"""
Server settings for the API process.
Environment variables override defaults.
"""
import os
from dataclasses import dataclass


@dataclass
class Settings:
    """HTTP server configuration"""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 1337
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    def __post_init__(self):
        """Load from environment variables"""
        for key in self.__dataclass_fields__:
            env_value = os.getenv(key)
            if env_value is not None:
                field_type = self.__dataclass_fields__[key].type
                if field_type == bool:
                    setattr(self, key, env_value.lower() in ("true", "1", "yes"))
                elif field_type == int:
                    setattr(self, key, int(env_value))
                else:
                    setattr(self, key, env_value)


# Global settings instance
settings = Settings()
