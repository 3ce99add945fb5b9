"""Configuration, logging and retry helpers."""
