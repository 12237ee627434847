"""Command line interface for dep-uplift."""
