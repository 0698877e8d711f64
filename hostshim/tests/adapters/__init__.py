"""Tests for host adapters and the daily session subsystem."""
