"""Sample third-party adapters."""
