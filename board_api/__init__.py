"""Pipeline board: live observability snapshots of pipeline plugins."""
