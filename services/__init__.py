from .errors import (
    RecordError,
    ValidationError,
    ForbiddenError,
    TenantMismatchError,
    NotFoundError,
    ConflictError,
    InternalError,
)
from .store import RecordStore
from .tenancy import Claims, OperatingTenant, NoAccess, NoAccessReason, TenantResolver
from .access_guard import AccessGuard, EntityType, Operation, Permission
from .reference_validator import ReferenceValidator
from .cascade_deleter import CascadeDeleter
from .upsert_coordinator import UpsertCoordinator
from .ai_client import AIClient, AIClientError
from .school_service import SchoolService
from .staff_service import StaffService
from .roster_service import RosterService
from .activity_service import ActivityService
from .student_records_service import StudentRecordsService
from .insight_service import InsightService

__all__ = [
    "RecordError",
    "ValidationError",
    "ForbiddenError",
    "TenantMismatchError",
    "NotFoundError",
    "ConflictError",
    "InternalError",
    "RecordStore",
    "Claims",
    "OperatingTenant",
    "NoAccess",
    "NoAccessReason",
    "TenantResolver",
    "AccessGuard",
    "EntityType",
    "Operation",
    "Permission",
    "ReferenceValidator",
    "CascadeDeleter",
    "UpsertCoordinator",
    "AIClient",
    "AIClientError",
    "SchoolService",
    "StaffService",
    "RosterService",
    "ActivityService",
    "StudentRecordsService",
    "InsightService",
]
