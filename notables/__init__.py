"""Notable events dashboard backend — log ingestion and aggregated views."""

__version__ = "0.1.0"
