"""
Club Config - environment settings

Supabase connection, default team, currency/billing defaults, logging
"""
from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class ClubSettings(BaseSettings):
    """Club manager settings"""

    # Supabase
    supabase_url: str = Field(default="", description="Supabase Project URL")
    supabase_key: str = Field(default="", description="Supabase anon/service key")

    # Team scoping
    default_team_id: Optional[str] = Field(default=None, description="Team used when no X-Team-Id header is sent")
    test_mode: bool = Field(default=False, description="Accept requests without a team header")

    # Club display
    club_name: str = "Club Sportif"
    currency: str = "DH"

    # Billing defaults (player membership / coach salary)
    default_membership_amount: Decimal = Decimal("300.00")
    default_salary_amount: Decimal = Decimal("500.00")

    # Dashboard
    upcoming_events_limit: int = Field(default=5, ge=1, le=50)

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"

    class Config:
        env_prefix = "CLUB_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> ClubSettings:
    return ClubSettings()
