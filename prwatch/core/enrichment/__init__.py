from prwatch.core.enrichment.enricher import PREnricher, apply_details

__all__ = ["PREnricher", "apply_details"]
