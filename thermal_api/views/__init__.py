"""Controladores de vista (listado, plan de tratamiento, dashboard)."""

from .controllers import (
    ActionPlanController,
    BaseRecordsController,
    DashboardController,
    FetchOutcome,
    RecordListController,
)
from .generation import FetchGeneration

__all__ = [
    "ActionPlanController",
    "BaseRecordsController",
    "DashboardController",
    "FetchOutcome",
    "FetchGeneration",
    "RecordListController",
]
