"""Data transfer objects shared across adapters."""

from .adapter_params import AdapterParams

__all__ = ["AdapterParams"]
