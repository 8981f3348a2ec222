from .loader import load_config, load_config_with_source
from .models import (
    ContentConfig,
    LinksConfig,
    MigrateConfig,
    PipelineConfig,
    ReportConfig,
    VersionConfig,
)

__all__ = [
    "ContentConfig",
    "LinksConfig",
    "MigrateConfig",
    "PipelineConfig",
    "ReportConfig",
    "VersionConfig",
    "load_config",
    "load_config_with_source",
]
