"""Model calls, ingestion and export around the asset store."""
