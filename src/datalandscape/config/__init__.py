from .config import (
    Config,
    ExtractionSettings,
    FetcherConfig,
    IngestionConfig,
    IngestionSource,
    MonitoringConfig,
    SourceSelectors,
    StorageConfig,
    WebConfig,
    find_config_file,
)

__all__ = [
    "Config",
    "ExtractionSettings",
    "FetcherConfig",
    "IngestionConfig",
    "IngestionSource",
    "MonitoringConfig",
    "SourceSelectors",
    "StorageConfig",
    "WebConfig",
    "find_config_file",
]
