"""Unit tests for core shim logic."""
