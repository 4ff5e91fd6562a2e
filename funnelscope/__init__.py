"""
Funnel Compass Backend Package.

FastAPI service layer for the Funnel Compass sales-intelligence CRM.
Provides the funnel analytics engine (metric derivation, benchmark gap
analysis, revenue projections) and the AI recommendation collaborator.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration, database, and dependencies
    - models: Pydantic schemas and enums
    - services: Analytics and record-access services
"""

__version__ = "1.0.0"
