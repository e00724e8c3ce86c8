"""Enrichment pipeline for the Bank of England millennium macroeconomic dataset."""
from millennium.lib.io_guards import DataLoadError
from millennium.pipeline import MillenniumPipeline, ProcessedData, run_pipeline

__all__ = ["DataLoadError", "MillenniumPipeline", "ProcessedData", "run_pipeline"]
