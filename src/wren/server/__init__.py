"""ASGI server integration — request adaptation, error mapping, sending."""
