from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql://postgres:postgres@db:5432/vacationplanner"

    # Auth settings
    session_cookie_name: str = "session_token"
    session_lifetime_days: int = 7
    password_hash_rounds: int = 10  # bcrypt work factor

    # Where the admin pre-filter sends browsers without a session
    login_page_path: str = "/login"

    log_level: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
