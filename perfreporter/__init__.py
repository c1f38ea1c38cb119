"""perfreporter - performance benchmark aggregation and regression tracking."""

__version__ = "1.0.0"
