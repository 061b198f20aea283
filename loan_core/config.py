"""Configuration management for loan-core."""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from loan_core.exceptions import ConfigurationError
from loan_core.models.financial.enums import TimeWindow


@dataclass
class DashboardConfig:
    """Dashboard aggregation settings."""

    due_soon_days: int = 7
    due_soon_limit: int = 10
    default_time_window: TimeWindow = TimeWindow.DAYS_30
    month_day_count: int = 30  # linear monthly interest approximation
    year_day_count: int = 365  # daily interest approximation

    def __post_init__(self) -> None:
        if self.due_soon_days < 0:
            raise ConfigurationError(f"due_soon_days must be >= 0, got {self.due_soon_days}")
        if self.due_soon_limit < 1:
            raise ConfigurationError(f"due_soon_limit must be >= 1, got {self.due_soon_limit}")
        if self.month_day_count < 1 or self.year_day_count < 1:
            raise ConfigurationError("Day counts must be positive")


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class SeedConfig:
    """Configuration for synthetic portfolio generation."""

    num_clients: int = 10
    loans_per_client: tuple[int, int] = (1, 3)
    on_time_rate: float = 0.80
    as_of: date | None = None


@dataclass
class LoanCoreConfig:
    """Main configuration for loan-core."""

    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    seed_data: SeedConfig = field(default_factory=SeedConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "LoanCoreConfig":
        """Create config from environment variables."""
        import os

        window_name = os.getenv("TIME_WINDOW", TimeWindow.DAYS_30.value)
        try:
            window = TimeWindow(window_name)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown TIME_WINDOW: {window_name!r}") from exc

        dashboard = DashboardConfig(
            due_soon_days=_int_env("DUE_SOON_DAYS", 7),
            due_soon_limit=_int_env("DUE_SOON_LIMIT", 10),
            default_time_window=window,
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        seed_data = SeedConfig(num_clients=_int_env("NUM_CLIENTS", 10))

        return cls(
            dashboard=dashboard,
            output=output,
            seed_data=seed_data,
            seed=_int_env("SEED", None),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )


def _int_env(name: str, default: int | None) -> int | None:
    import os

    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
