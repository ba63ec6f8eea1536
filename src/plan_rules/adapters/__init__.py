"""Adapter layer package for plan ingestion."""

from .plan_loader import PlanLoader, PlanLoaderError

__all__ = [
    "PlanLoader",
    "PlanLoaderError",
]
