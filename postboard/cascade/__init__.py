"""Dependent deletion across users, posts, comments and likes."""
