"""Subsystems whose periodic work the shim can take control of."""
