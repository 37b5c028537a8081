"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Application initialization and default administrator creation
- db: Database configuration and connection management
- envelope: Response envelope helpers
- errors: Typed API errors mapped to HTTP statuses
- events: Operational log entries (database + logger)
- security: Password hashing, bearer tokens and verification codes
"""
