"""merchants — tenant merchant-profile CRUD routes."""
