"""Posts: CRUD, detail view and paginated search."""
