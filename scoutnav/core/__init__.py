"""Report ingestion."""
