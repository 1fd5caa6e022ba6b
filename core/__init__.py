# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the page-building logic:
# - ordering.py: OrderedDraft and commit planning (no I/O)
# - journal.py: step journal for multi-request commits
# - models/: Pydantic schemas for data validation
# - services/: Supabase-backed operations per entity
#
# Code in this package should NOT import from FastAPI routers.
# This keeps the logic testable and reusable.
# =============================================================================
