from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_FLAT_CEILING = 200
DEFAULT_CHIP_CEILING = 200
LIMITS_ENV_VAR = "DECODING_QC_LIMITS"

LOGGER = logging.getLogger(__name__)


class CheckParameters(BaseModel):
    """Per-cycle key/value bag handed over by the host.

    Accepts the host's camelCase keys (``DecLinkErrorLimits``, ``doFlatCheck``,
    ``plotWithTextMessage``, ``textMessage``) as well as the field names.
    Values may arrive as raw strings; pydantic coerces ``"true"``/``"200"``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    limits: str = Field(default="", alias="DecLinkErrorLimits")
    flat_check: bool = Field(default=False, alias="doFlatCheck")
    flat_ceiling: int = Field(default=DEFAULT_FLAT_CEILING, ge=0, alias="flatCheckCeiling")
    flat_scan_last_bin: bool = Field(default=False, alias="flatCheckScanLastBin")
    delimiter: str = Field(default=",", min_length=1)
    plot_with_text_message: str = Field(default="", alias="plotWithTextMessage")
    text_message: str = Field(default="", alias="textMessage")

    @classmethod
    def from_custom_parameters(cls, bag: Mapping[str, Any]) -> CheckParameters:
        """Build parameters from the host bag, dropping keys whose values are invalid."""
        values = dict(bag)
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            invalid = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
            # Error locations may name either the alias or the field.
            for name, info in cls.model_fields.items():
                if name in invalid or info.alias in invalid:
                    invalid.update({name, info.alias or name})
            LOGGER.error(
                "Ignoring invalid check parameters %s; using defaults for them",
                ", ".join(sorted(key for key in values if key in invalid)),
            )
            return cls.model_validate(
                {key: value for key, value in values.items() if key not in invalid}
            )


class SeriesConfig(BaseModel):
    link_series_pattern: str = "General/LinkErrorPlots"
    chip_series_name: str = "General/ChipErrorPlots"
    chip_ceiling: int = Field(default=DEFAULT_CHIP_CEILING, ge=0)
    chip_ceiling_metric: Literal["max", "sum"] = "max"


class OutputsConfig(BaseModel):
    tables_format: Literal["csv", "parquet"] = "csv"
    figures_format: str = "png"


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    check: CheckParameters = Field(default_factory=CheckParameters)
    series: SeriesConfig = Field(default_factory=SeriesConfig)
    error_kinds: list[str] | None = None
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        raise ValueError(f"config file must contain a mapping/object: {path}")

    config = AppConfig.model_validate(data)
    env_limits = os.getenv(LIMITS_ENV_VAR)
    if env_limits is not None and env_limits.strip():
        config.check.limits = env_limits.strip()
    return config
