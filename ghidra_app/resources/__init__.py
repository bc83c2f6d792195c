"""Static files copied into every bundle."""
