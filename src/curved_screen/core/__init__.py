"""Shared settings, transforms and logging for curved_screen."""
