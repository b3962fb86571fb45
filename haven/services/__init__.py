"""Business logic services."""
from haven.services.backfill_service import BackfillService
from haven.services.broll_service import BrollService
from haven.services.lifecycle_service import LifecycleService
from haven.services.profile_service import ProfileService, ScheduleService
from haven.services.search_service import SearchService
from haven.services.staging_service import StagingService

__all__ = [
    "BackfillService",
    "BrollService",
    "LifecycleService",
    "ProfileService",
    "ScheduleService",
    "SearchService",
    "StagingService",
]
