"""View models for the chat list."""
