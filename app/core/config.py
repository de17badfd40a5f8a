from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App settings
    PROJECT_NAME: str = "PersonalFinanceTracker"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = "INFO"
    CURRENCY: str = "USD"

    # DynamoDB
    DYNAMO_REGION: str = "eu-west-1"
    DYNAMO_ENDPOINT_URL: Optional[str] = None  # e.g. http://localhost:8001 for DynamoDB Local
    DYNAMO_TRANSACTIONS_TABLE: str = "personal-finance-transactions"
    DYNAMO_BUDGETS_TABLE: str = "personal-finance-budgets"
    DYNAMO_CREATE_TABLES: bool = False

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Client store
    API_BASE_URL: str = "http://localhost:8000/api"
    STORE_SNAPSHOT_PATH: Optional[str] = "finance-store.json"


settings = Settings()
