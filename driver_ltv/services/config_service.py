from __future__ import annotations

from pathlib import Path
from typing import Optional, Dict, Any, Union

import yaml
from pydantic import BaseModel, Field, conint, confloat

from config.dlv_config import DATA_CONFIG, ANALYSIS_CONFIG


DEFAULT_OVERRIDES_PATH = Path("config/dlv_overrides.yaml")


class DataConfigSchema(BaseModel):
    utc_offset_hours: confloat(ge=-12, le=14) = Field(DATA_CONFIG['utc_offset_hours'])
    has_header: bool = DATA_CONFIG['has_header']


class AnalysisConfigSchema(BaseModel):
    activity_window_days: conint(ge=0, le=365) = Field(ANALYSIS_CONFIG['activity_window_days'])
    revenue_share: confloat(gt=0, le=1) = Field(ANALYSIS_CONFIG['revenue_share'])
    max_survival_days: Optional[conint(ge=2)] = ANALYSIS_CONFIG['max_survival_days']
    n_jobs: int = ANALYSIS_CONFIG['n_jobs']
    show_progress: bool = ANALYSIS_CONFIG['show_progress']


class DLVOverrides(BaseModel):
    data: DataConfigSchema = DataConfigSchema()
    analysis: AnalysisConfigSchema = AnalysisConfigSchema()


def load_overrides(path: Union[str, Path, None] = None) -> DLVOverrides:
    """
    Read YAML overrides. Without a path the default overrides file is used
    when present; an explicitly given path must exist.
    """
    if path is None:
        if not DEFAULT_OVERRIDES_PATH.exists():
            return DLVOverrides()
        path = DEFAULT_OVERRIDES_PATH
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"configuration file not found: {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return DLVOverrides(**data)


def save_overrides(overrides: DLVOverrides, path: Union[str, Path, None] = None) -> None:
    path = Path(path) if path is not None else DEFAULT_OVERRIDES_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(overrides.model_dump(), sort_keys=False), encoding="utf-8")


def merged_runtime_config(path: Union[str, Path, None] = None, **cli_overrides: Any) -> Dict[str, Any]:
    """
    Flat runtime configuration: defaults, then YAML overrides, then any
    keyword overrides that are not None (typically command line flags).
    """
    overrides = load_overrides(path)
    merged: Dict[str, Any] = {
        **overrides.data.model_dump(),
        **overrides.analysis.model_dump(),
    }

    explicit = {k: v for k, v in cli_overrides.items() if v is not None}
    unknown = set(explicit) - set(merged)
    if unknown:
        raise KeyError(f"unknown configuration keys: {sorted(unknown)}")
    merged.update(explicit)

    # Validate the combined result with the same bounds as the YAML file
    validated = DLVOverrides(
        data={k: merged[k] for k in DataConfigSchema.model_fields},
        analysis={k: merged[k] for k in AnalysisConfigSchema.model_fields},
    )
    return {**validated.data.model_dump(), **validated.analysis.model_dump()}
