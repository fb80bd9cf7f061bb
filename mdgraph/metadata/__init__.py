"""Source metadata model, loader, walker and exporter."""

from .exporter import MetadataExporter
from .loader import MetadataLoadError, load_configuration, load_configuration_file
from .model import Configuration, MDObject, MDOType
from .walker import MetadataWalker

__all__ = [
    "Configuration",
    "MDOType",
    "MDObject",
    "MetadataExporter",
    "MetadataLoadError",
    "MetadataWalker",
    "load_configuration",
    "load_configuration_file",
]
