"""
FastAPI routers, one module per resource.

Every handler resolves the Supabase client per request through
backend.db.client.get_supabase_client and delegates to backend.services.
"""
