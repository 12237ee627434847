"""dep-uplift - Report dependency version changes between two revisions of a repository."""

__version__ = "0.1.0"
