"""Core dispatch fabric: schemas, registry, HTTP adapter, result normalizer."""
