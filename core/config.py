import json

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings

from core.exceptions import ConfigError


class Settings(BaseSettings):
    VERSION: str = "1.0"
    LOGGING_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 3000

    SLACK_CONFIG_PATH: str = "slackConfig.json"
    BOX_CONFIG_PATH: str = "boxConfig.json"


    class Config:
        env_file = ".env"



class SlackConfig(BaseModel):
    """Secrets issued by the Slack app configuration page"""
    verification_token: str = Field(alias="verificationToken")
    bot_token: str = Field(alias="botToken")

    model_config = {"populate_by_name": True}



def load_slack_config(path: str) -> SlackConfig:
    """Read the Slack secret file, failing fast when it is missing or incomplete"""
    try:
        with open(path, encoding="utf-8") as f:
            return SlackConfig.model_validate(json.load(f))
    except FileNotFoundError:
        raise ConfigError(f"Slack config file not found: {path}")
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigError(f"Invalid Slack config file {path}: {e}")



settings = Settings()
