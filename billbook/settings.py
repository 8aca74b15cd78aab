import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="BILLBOOK_", extra="ignore")

    db_url: str = "sqlite:///billbook.db"

    upi_vpa: str = ""
    upi_payee_name: str = ""
    currency: str = "INR"

    business_name: str = "Billbook"
    invoice_prefix: str = "INV"
    invoice_output_path: str = "./invoices"

    # Persist the caller-supplied total on create instead of recomputing it
    trust_client_total: bool = False

    log_level: str = "INFO"
    log_json: bool = False


settings = Settings()
