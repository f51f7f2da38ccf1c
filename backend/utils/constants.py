"""
Enumerated values shared by schemas and services.

These mirror the CHECK constraints / enums in the database.
"""

TRANSACTION_TYPES = ("INCOME", "EXPENSE")

DEVOTIONAL_FREQUENCIES = ("WEEKLY", "MONTHLY")

ATTENDANCE_STATUSES = ("PRESENT", "ABSENT", "JUSTIFIED")

GROUP_ITEM_TYPES = ("LINK", "FILE")

# notifications.type values
NOTIFICATION_TYPES = {
    'GROUP_ITEM_PUBLISHED': 'GROUP_ITEM_PUBLISHED',
    'SCALE_ASSIGNMENT': 'SCALE_ASSIGNMENT',
    'SCALE_PUBLISHED': 'SCALE_PUBLISHED',
}

# notifications.entity_type values
NOTIFICATION_ENTITY_TYPES = {
    'GROUP': 'GROUP',
    'SCALE': 'SCALE',
}

# Embedded author/user shape used by PostgREST resource embedding
AUTHOR_EMBED = "author:users(id,name,email)"
