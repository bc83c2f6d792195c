"""Core subsystems: artifact table, cache, extraction, bundle assembly, natives."""
