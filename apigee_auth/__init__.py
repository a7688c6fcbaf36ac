"""Browser-driven Apigee login that exports session headers for API tools."""

__version__ = "1.0"
