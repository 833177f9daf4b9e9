"""Core data model, session context, errors, logging and the public API."""
