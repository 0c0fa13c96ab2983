"""Menu optimization and suggestion pipeline."""
