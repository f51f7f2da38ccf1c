"""
Database access layer for the ministry backend.

All tables live in Postgres behind Supabase's PostgREST interface:
users, events, financial_transactions, devotional_posts, observations,
rehearsals, attendance_records, groups, group_members, group_items,
scales, scale_assignments, notifications.

DO NOT define table schemas or migrations here.
"""

from .client import get_supabase_client, reset_supabase_client

__all__ = ["get_supabase_client", "reset_supabase_client"]
