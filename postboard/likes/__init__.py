"""Toggle likes on posts and comments."""
