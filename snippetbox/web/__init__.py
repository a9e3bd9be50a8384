"""HTTP layer: middleware pipelines, route table and handlers."""
