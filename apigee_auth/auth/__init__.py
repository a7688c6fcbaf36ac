"""Apigee login automation."""
