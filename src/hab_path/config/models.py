from math import isfinite
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

ShapeName = Literal["cylinder", "dome"]


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = 100


# ----------------- ENGINE ---------------------


class EngineModel(BaseModel):
    """Tunable constants for search and clearance validation. Lengths in meters."""

    model_config = ConfigDict(extra="forbid")
    min_path_width: float = 1.0
    grid_size: float = 0.5
    max_iterations: int = 1000
    sample_count: int = 5
    search_occupancy_tolerance: float = 0.6
    validation_occupancy_tolerance: float = 0.5
    search_wall_margin: float = 0.5
    validation_wall_margin: float = 0.3
    max_wall_s: float | None = None  # None => expansion budget only
    scale_budget_with_area: bool = False

    @field_validator(
        "min_path_width",
        "grid_size",
        "search_occupancy_tolerance",
        "validation_occupancy_tolerance",
    )
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if not isfinite(v) or v <= 0:
            raise ValueError(f"{info.field_name} must be a positive number")
        return v

    @field_validator("search_wall_margin", "validation_wall_margin")
    def _nonneg(cls, v: float, info: ValidationInfo) -> float:
        if not isfinite(v) or v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @field_validator("max_iterations")
    def _at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_iterations must be >= 1")
        return v

    @field_validator("sample_count")
    def _two_samples(cls, v: int) -> int:
        # both segment endpoints are always sampled
        if v < 2:
            raise ValueError("sample_count must be >= 2")
        return v

    @field_validator("max_wall_s")
    def _wall_budget(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("max_wall_s must be positive when set")
        return v


# ----------------- HABITAT ---------------------


class HabitatModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    shape: ShapeName
    radius: float
    floor_height: float = 3.0
    floors: int = 1
    floor_shapes: list[ShapeName] | None = None

    @field_validator("radius", "floor_height")
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if not isfinite(v) or v <= 0:
            raise ValueError(f"{info.field_name} must be a positive number, got {v}")
        return v

    @field_validator("floors")
    def _floors(cls, v: int) -> int:
        if v < 1:
            raise ValueError("floors must be >= 1")
        return v

    @field_validator("floor_shapes", mode="before")
    @classmethod
    def _empty_to_none(cls, v):
        # [] means "every floor uses the habitat shape"
        if v is None:
            return None
        if isinstance(v, (list, tuple)) and len(v) == 0:
            return None
        return v

    @model_validator(mode="after")
    def _check_floor_shapes(self):
        if self.floor_shapes is not None and len(self.floor_shapes) != self.floors:
            raise ValueError(
                f"floor_shapes must have length {self.floors}, got {len(self.floor_shapes)}"
            )
        return self


# ------------------------------------------------------------------


class ToolModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    run_id: str = "local"
    engine: EngineModel = Field(default_factory=EngineModel)
    log: LogModel = LogModel()
