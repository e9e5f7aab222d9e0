"""Background jobs and demo runners."""
