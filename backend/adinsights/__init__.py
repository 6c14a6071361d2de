"""Ad creative scoring and portfolio insights service."""

__version__ = "0.1.0"
