"""Monitoring - contadores del pipeline."""

from .stats import PipelineStats

__all__ = ["PipelineStats"]
