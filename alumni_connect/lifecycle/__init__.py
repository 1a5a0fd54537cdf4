"""Request/offer lifecycle coordination.

- ``transitions``: the per-kind state machine and its conditional-write filters
- ``permissions``: injectable permission checks applied before each write
- ``guard``: duplicate-submission guard shared with the views
- ``service``: ``LifecycleService``, the entry point for every write
"""

from .guard import SubmissionGuard
from .permissions import DEFAULT_RULES, PermissionCheck, RolePermissions, require_permission
from .service import LifecycleDeps, LifecycleService
from .transitions import DEFAULT_TRANSITIONS, Transition, TransitionTable, check_capacity, default_table

__all__ = [
    "DEFAULT_RULES",
    "DEFAULT_TRANSITIONS",
    "LifecycleDeps",
    "LifecycleService",
    "PermissionCheck",
    "RolePermissions",
    "SubmissionGuard",
    "Transition",
    "TransitionTable",
    "check_capacity",
    "default_table",
    "require_permission",
]
