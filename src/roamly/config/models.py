import json
import os
from math import isfinite
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class _Model(BaseModel):
    # camelCase keys are accepted as aliases, as in destinations.json
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class LogModel(_Model):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = Field(default=1, alias="sampleEvery", ge=1)


class DataModel(_Model):
    path: str = "destinations.json"

    @field_validator("path")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


class AnimationModel(_Model):
    step_count: int = Field(default=200, alias="stepCount")
    duration_ms: float = Field(default=2500.0, alias="durationMs")
    curve_factor: float = Field(default=0.15, alias="curveFactor")
    settle_delay_ms: float = Field(default=200.0, alias="settleDelayMs")
    arrival_delay_ms: float = Field(default=500.0, alias="arrivalDelayMs")
    landing_grace_ms: float = Field(default=500.0, alias="landingGraceMs")
    settle_timeout_ms: float = Field(default=1500.0, alias="settleTimeoutMs")
    frame_interval_ms: float = Field(default=1000.0 / 60.0, alias="frameIntervalMs", gt=0)

    @field_validator(
        "settle_delay_ms", "arrival_delay_ms", "landing_grace_ms", "settle_timeout_ms"
    )
    @classmethod
    def _nonneg(cls, v: float, info: ValidationInfo) -> float:
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @field_validator("curve_factor", "duration_ms")
    @classmethod
    def _finite(cls, v: float, info: ValidationInfo) -> float:
        if not isfinite(v):
            raise ValueError(f"{info.field_name} must be finite")
        return v


class ViewModel(_Model):
    route_padding: tuple[int, int] = Field(default=(100, 100), alias="routePadding")
    route_fit_s: float = Field(default=1.2, alias="routeFitS", ge=0)
    route_ease_linearity: float = Field(default=0.25, alias="routeEaseLinearity")
    all_padding: tuple[int, int] = Field(default=(80, 80), alias="allPadding")
    all_fit_s: float = Field(default=1.5, alias="allFitS", ge=0)
    details_zoom: int = Field(default=10, alias="detailsZoom", ge=0)
    details_fly_s: float = Field(default=1.5, alias="detailsFlyS", ge=0)

    def route_options(self) -> dict[str, Any]:
        return {
            "padding": self.route_padding,
            "duration": self.route_fit_s,
            "ease_linearity": self.route_ease_linearity,
        }

    def all_options(self) -> dict[str, Any]:
        return {"padding": self.all_padding, "duration": self.all_fit_s}

    def details_options(self) -> dict[str, Any]:
        return {"duration": self.details_fly_s}


class AppModel(_Model):
    name: str = "roamly"
    run_id: str = Field(default="local", alias="runId")
    data: DataModel = DataModel()
    log: LogModel = LogModel()
    animation: AnimationModel = AnimationModel()
    view: ViewModel = ViewModel()


def _load_yaml(path: Path) -> Any:
    with path.open("r", encoding="utf8") as handle:
        return yaml.safe_load(handle)


def load_config(path: str | Path) -> AppModel:
    """Load an :class:`AppModel` from a JSON or YAML file."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)

    if path.suffix.lower() in {".yaml", ".yml"}:
        raw = _load_yaml(path)
    else:
        with path.open("r", encoding="utf8") as handle:
            raw = json.load(handle)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError("Configuration file must contain a mapping at the top level.")
    return AppModel.model_validate(raw)
