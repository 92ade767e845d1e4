"""Shared helpers: species selectors, trajectory extraction, configuration."""
