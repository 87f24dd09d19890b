"""Core modules for dirstamp: configuration, errors and the stamp engine."""
