"""PocketBase data access: connections, retry policy and repositories."""
