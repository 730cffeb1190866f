# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic:
# - models/: Pydantic schemas (comments, rooms, contact form)
# - services/: Comment and contact operations
#
# Routes call services; services call lib/ for storage and email.
# =============================================================================
