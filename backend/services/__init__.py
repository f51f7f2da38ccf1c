"""
Service layer.

Services hold the domain rules and talk to Supabase (PostgREST). They
return plain dicts, None for a missing row and False for a no-op delete;
routes translate those into HTTP responses.
"""

from .attendance_service import list_attendance, set_attendance
from .auth_service import change_password, login_user, register_user
from .devotional_service import (
    create_devotional,
    delete_devotional,
    get_devotional_by_id,
    list_devotionals,
    update_devotional,
)
from .event_service import create_event, delete_event, get_event_by_id, list_events, update_event
from .group_service import (
    create_group,
    create_group_item,
    delete_group,
    delete_group_item,
    get_group_by_id,
    list_group_items,
    list_groups,
    update_group,
)
from .notification_service import (
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
    notify_users,
)
from .observation_service import (
    create_observation,
    delete_observation,
    get_observation_by_id,
    list_observations,
    update_observation,
)
from .rehearsal_service import (
    create_rehearsal,
    delete_rehearsal,
    get_rehearsal_by_id,
    list_rehearsals,
    update_rehearsal,
)
from .scale_service import create_scale, delete_scale, list_scales, mark_scale_viewed, update_scale
from .transaction_service import (
    create_transaction,
    delete_transaction,
    get_financial_summary,
    get_transaction_by_id,
    list_transactions,
    update_transaction,
)
from .user_service import create_user, delete_user, get_user_by_id, list_users, update_user

__all__ = [
    "change_password",
    "create_devotional",
    "create_event",
    "create_group",
    "create_group_item",
    "create_observation",
    "create_rehearsal",
    "create_scale",
    "create_transaction",
    "create_user",
    "delete_devotional",
    "delete_event",
    "delete_group",
    "delete_group_item",
    "delete_observation",
    "delete_rehearsal",
    "delete_scale",
    "delete_transaction",
    "delete_user",
    "get_devotional_by_id",
    "get_event_by_id",
    "get_financial_summary",
    "get_group_by_id",
    "get_observation_by_id",
    "get_rehearsal_by_id",
    "get_transaction_by_id",
    "get_user_by_id",
    "list_attendance",
    "list_devotionals",
    "list_events",
    "list_group_items",
    "list_groups",
    "list_notifications",
    "list_observations",
    "list_rehearsals",
    "list_scales",
    "list_transactions",
    "list_users",
    "login_user",
    "mark_all_notifications_read",
    "mark_notification_read",
    "mark_scale_viewed",
    "notify_users",
    "register_user",
    "set_attendance",
    "update_devotional",
    "update_event",
    "update_group",
    "update_observation",
    "update_rehearsal",
    "update_scale",
    "update_transaction",
    "update_user",
]
