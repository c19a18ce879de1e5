from dataclasses import dataclass
from typing import Optional


@dataclass
class SpanmapConfig:
    """Configuration for the spanmap CLI."""

    delimiter: str = ";"
    filter_field: str = "region"
    filter_value: Optional[str] = None
    region_layers: bool = False
    geodesic_segments: int = 16
    bbox_buffer: float = 0.05
    timeout: int = 30
    validate: bool = False
    log_level: str = "WARNING"
    metrics: bool = False
