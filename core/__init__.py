# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the account logic behind the HTTP layer:
# - models/: Pydantic schemas for data validation
# - services/: User account operations over the database pool
#
# Code in this package should NOT define routes or touch Request objects.
# This keeps the logic testable and reusable.
# =============================================================================
