"""Backend HTTP client."""
