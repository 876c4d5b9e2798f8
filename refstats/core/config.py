from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logger import get_logger


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # League baselines blended into the expected-cards model.
    league_avg_yellow: float = Field(4.0, alias="LEAGUE_AVG_YELLOW")
    league_avg_red: float = Field(0.15, alias="LEAGUE_AVG_RED")

    # Odds comparison: EV is a fraction (0.05 = +5%), min_ev_percent is in percent.
    value_ev_threshold: float = Field(0.05, alias="VALUE_EV_THRESHOLD")
    min_ev_percent: float = Field(5.0, alias="MIN_EV_PERCENT")

    @model_validator(mode="after")
    def validate_league_baselines(self):
        if self.league_avg_yellow <= 0 or self.league_avg_red < 0:
            logger = get_logger("settings")
            logger.warning(
                "league baselines look wrong (yellow=%s red=%s); forecasts will skew toward zero",
                self.league_avg_yellow,
                self.league_avg_red,
            )
        return self


default_settings = Settings()
settings = default_settings
