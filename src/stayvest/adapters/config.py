# src/stayvest/adapters/config.py
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # persistence (comparable statistics)
    DB_URI: str = Field(default="sqlite:///stayvest.db")

    # When true, every route except /health answers 503
    MAINTENANCE_MODE: bool = Field(default=False)

    # -----------------------------
    # Financing
    # -----------------------------
    # Annual percent (6.89 means 6.89%), Freddie Mac PMMS fallback
    DEFAULT_INTEREST_RATE: float = Field(default=6.89)

    # -----------------------------
    # STR expense assumptions
    # -----------------------------
    PROPERTY_TAX_RATE: float = Field(default=0.0125)
    ANNUAL_INSURANCE: float = Field(default=2400.0)
    ANNUAL_UTILITIES: float = Field(default=3000.0)
    CLEANING_COST_PER_TURN: float = Field(default=60.0)
    DEFAULT_ESTIMATED_TURNS: float = Field(default=80.0)
    PLATFORM_FEE_RATE: float = Field(default=0.03)
    MAINTENANCE_RATE: float = Field(default=0.02)
    OCCUPANCY_TAX_RATE: float = Field(default=0.105)
    PERMIT_FEE: float = Field(default=125.0)
    PROPERTY_MANAGEMENT_RATE: float = Field(default=0.20)

    SEASONAL_OCCUPANCY_LOW: float = Field(default=0.55)
    SEASONAL_OCCUPANCY_HIGH: float = Field(default=0.89)

    # -----------------------------
    # Recommendation / confidence thresholds
    # -----------------------------
    BUY_THRESHOLD: float = Field(default=0.08)
    CONSIDER_THRESHOLD: float = Field(default=0.05)
    STRONG_INVESTMENT_THRESHOLD: float = Field(default=0.06)

    HIGH_CONFIDENCE_LISTING_COUNT: int = Field(default=50)
    MEDIUM_CONFIDENCE_LISTING_COUNT: int = Field(default=20)

    model_config = SettingsConfigDict(
        env_prefix="STAYVEST_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "PROPERTY_TAX_RATE",
        "PLATFORM_FEE_RATE",
        "MAINTENANCE_RATE",
        "OCCUPANCY_TAX_RATE",
        "PROPERTY_MANAGEMENT_RATE",
        "SEASONAL_OCCUPANCY_LOW",
        "SEASONAL_OCCUPANCY_HIGH",
        "BUY_THRESHOLD",
        "CONSIDER_THRESHOLD",
        "STRONG_INVESTMENT_THRESHOLD",
        mode="before",
    )
    @classmethod
    def _to_non_negative_fraction(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("rate must be numeric or percent-like") from err
        if f > 1.0:
            f = f / 100.0
        if f < 0:
            raise ValueError("rate must be non-negative")
        return f

    @field_validator(
        "ANNUAL_INSURANCE",
        "ANNUAL_UTILITIES",
        "CLEANING_COST_PER_TURN",
        "DEFAULT_ESTIMATED_TURNS",
        "PERMIT_FEE",
        "DEFAULT_INTEREST_RATE",
        mode="before",
    )
    @classmethod
    def _non_negative_amount(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().replace("$", "").replace(",", "").replace("%", "")
        f = float(v)
        if f < 0:
            raise ValueError("amount must be non-negative")
        return f

    @field_validator("MEDIUM_CONFIDENCE_LISTING_COUNT", "HIGH_CONFIDENCE_LISTING_COUNT", mode="before")
    @classmethod
    def _count_positive(cls, v: Any) -> Any:
        n = int(v)
        if n <= 0:
            raise ValueError("listing count thresholds must be > 0")
        return n


config = AppConfig()


class MaintenanceSettings(BaseSettings):
    MAINTENANCE_MODE: bool = Field(default=False)

    model_config = SettingsConfigDict(env_prefix="STAYVEST_", case_sensitive=False, extra="ignore")


def maintenance_mode_enabled() -> bool:
    """Re-read STAYVEST_MAINTENANCE_MODE from the environment on every call."""
    return MaintenanceSettings().MAINTENANCE_MODE
