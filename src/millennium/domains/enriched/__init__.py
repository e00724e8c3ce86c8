"""enriched package

Enrichment layers that turn parsed year records into the enriched frame used
by segmentation, the summary and the front-end.

Structure:
 - enrich_global.py: growth rates, period labels and change points
"""

__all__ = ["enrich_global"]
