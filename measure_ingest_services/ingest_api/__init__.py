"""HTTP service and core pipeline for measurement batch ingestion."""
