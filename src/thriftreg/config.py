"""
Registrar settings, read from the environment (prefix ``THRIFTREG_``).
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConventionSettings(BaseModel):
    # Thrift's Python generator emits <Service>.Iface and <Service>.Processor
    interface_suffix: str = "Iface"
    dispatcher_suffix: str = "Processor"

    @field_validator("interface_suffix", "dispatcher_suffix")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("naming suffix must not be blank")
        return v


class RegistrarSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="THRIFTREG_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False

    # Raise the first per-handler error instead of collecting it in the report.
    fail_fast: bool = False

    # Build every registration right after the scan (load-on-startup endpoints).
    eager_init: bool = True

    servlet_suffix: str = "Servlet"
    load_on_startup: int = 1

    convention: ConventionSettings = Field(default_factory=ConventionSettings)


@lru_cache(maxsize=1)
def get_settings() -> RegistrarSettings:
    return RegistrarSettings()
