"""
Domain layer for RSVP notification business logic.

This layer contains:
- Data models (immutable contracts between components)
- Message composition (pure, template-driven)
- Submission pipeline (configuration check, delivery, result mapping)
"""
