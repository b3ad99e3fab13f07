"""
Components of the sourcemap sync pipeline.
Provides HashCalculator, SourceExtractor and the batch scheduler.
"""
from services.components.hash_calculator import HashCalculator
from services.components.source_extractor import SourceExtractor
from services.components.batch_scheduler import run_batches

__all__ = [
    "HashCalculator",
    "SourceExtractor",
    "run_batches",
]
