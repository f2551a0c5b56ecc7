"""Core runtime wiring: errors, logging, exception handlers, lifespan."""
