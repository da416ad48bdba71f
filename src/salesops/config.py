"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_REGION_ALIASES: dict[str, str] = {
    "jedda": "Jeddah",
    "jeddah consumer": "Jeddah",
    "jeddah-consumer": "Jeddah",
    "ryadh": "Riyadh",
    "riyadh consumer": "Riyadh",
    "dammad": "Dammam",
    "dammam consumer": "Dammam",
    "khobar": "Al Khobar",
    "alkhobar": "Al Khobar",
    "makkah region": "Makkah",
    "makkah consumer": "Makkah",
    "madina": "Madinah",
    "medina": "Madinah",
    "taif consumer": "Taif",
}


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="SALESOPS_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Sales Operations Advisor API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for static data files.")
    visits_file: Path = Field(
        default=Path("data/visits.csv"),
        description="Visit dataset used when Supabase is not configured.",
    )

    # Route re-assignment optimizer
    min_improvement_km: float = Field(
        default=5.0,
        ge=0.0,
        description="Minimum average-distance improvement (km) before a move is suggested.",
    )
    isolated_peer_distance_km: float = Field(
        default=999.0,
        ge=0.0,
        description="Average peer distance assumed for a visit with no valid peers in its own route.",
    )
    max_suggestions: int = Field(default=50, ge=1)
    neighbors_sample_size: int = Field(default=5, ge=0)
    visit_fetch_limit: int = Field(default=50_000, ge=1)
    urban_traffic_factor: float = Field(default=1.35, ge=1.0)
    short_hop_traffic_factor: float = Field(default=1.3, ge=1.0)

    # Data cleaning
    duplicate_proximity_degrees: float = Field(
        default=0.001,
        gt=0.0,
        description="Planar distance in raw degrees below which two records are considered co-located.",
    )
    branch_master_min_length: int = Field(default=3, ge=1)
    region_aliases: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_REGION_ALIASES))

    # Backend tables
    visits_table: str = "company_uploaded_data"
    branches_table: str = "company_branches"
    routes_table: str = "routes"
    leads_table: str = "global_reach_leads"

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("data_root", "visits_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("region_aliases", mode="before")
    @classmethod
    def _normalize_alias_keys(cls, value: Any) -> dict[str, str]:
        """Accept a JSON object from the environment and lower-case its keys."""
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError as exc:
                raise ValueError("region_aliases must be a JSON object") from exc
        if not isinstance(value, dict):
            raise ValueError("region_aliases must be a mapping")
        return {str(key).strip().lower(): str(canonical) for key, canonical in value.items()}


settings = Settings()
