from .loader import load_config
from .models import HashsnapConfig, OutputConfig, SnapshotConfig

__all__ = [
    "HashsnapConfig",
    "OutputConfig",
    "SnapshotConfig",
    "load_config",
]
