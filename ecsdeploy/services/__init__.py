"""Service layer: deploy stages built on the platform and git adapters."""
