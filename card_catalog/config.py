from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    timezone: str = ""  # IANA zone for "today"; empty uses the host's local date
    schedule_min_year: int = 2000
    schedule_max_year: int = 2100

    model_config = {"env_prefix": "", "case_sensitive": False}


settings = Settings()
