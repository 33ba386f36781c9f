"""Remediation advisor client."""
