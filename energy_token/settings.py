from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=(".env",), extra="ignore")

    ENVIRONMENT: str = "LOCAL"
    LOG_LEVEL: str = "INFO"

    # Static token identity
    TOKEN_NAME: str = "EnerGridX Energy Token"
    TOKEN_SYMBOL: str = "EGX"
    TOKEN_DECIMALS: int = 6

    # Ledger limits, in base units (1/10^6 kWh)
    MAX_SUPPLY: int = 1_000_000_000_000
    SOURCE_MAX_LENGTH: int = 32


settings = Settings()
