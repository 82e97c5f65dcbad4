# Database package: lazy engine/session management and ORM models
