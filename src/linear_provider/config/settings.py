"""Provider configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Linear provider configuration loaded from environment variables."""

    # API
    api_url: str = "https://api.linear.app/graphql"
    api_key: str = ""
    token: str = ""
    timeout: float = 30.0

    # State
    state_file: str = "linear.tfstate.json"

    model_config = {
        "env_prefix": "LINEAR_",
        "env_file": ".env",
        "extra": "ignore",
    }
