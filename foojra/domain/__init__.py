"""Domain helpers: record ids and collection filters."""
