from enum import Enum
from functools import lru_cache

from pydantic_settings import BaseSettings


class TextFailurePolicy(str, Enum):
    ABORT = "abort"
    CONTINUE = "continue"


class Settings(BaseSettings):
    PROJECT_NAME: str = "Instagram Messaging Relay"
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    # Meta app credentials
    VERIFY_TOKEN: str = ""
    PAGE_ID: str = ""
    PAGE_ACCESS_TOKEN: str = ""

    GRAPH_API_HOST: str = "https://graph.facebook.com"
    GRAPH_API_VERSION: str = "v19.0"
    REQUEST_TIMEOUT: float = 10.0

    EXPECTED_OBJECT: str = "instagram"
    PLACEHOLDER_IMAGE_URL: str = "https://i.gifer.com/Ifph.gif"
    TEXT_FAILURE_POLICY: TextFailurePolicy = TextFailurePolicy.ABORT

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def graph_api_base_url(self) -> str:
        return f"{self.GRAPH_API_HOST.rstrip('/')}/{self.GRAPH_API_VERSION}"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
