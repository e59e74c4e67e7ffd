from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AliasChoices

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    llm_api_key: str = Field(default="", validation_alias=AliasChoices('llm_api_key', 'google_api_key', 'gemini_api_key'))
    llm_model_name: str = Field(default="gemini-2.5-flash", validation_alias=AliasChoices('llm_model_name', 'google_model_name'))
    cors_origins: str = "http://localhost:3000"
    default_currency: str = "€"
    max_people: int = 50
    share_base_url: str = "http://localhost:3000/"
    log_level: str = "INFO"


settings = Settings()
