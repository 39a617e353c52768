"""
Pipeline orchestration module.

Contains the cleaning runner. Stage functions live under cleaning/.
"""
from .runner import clean_events, run_pipeline

__all__ = [
    'clean_events',
    'run_pipeline',
]
