"""Example handler containers for tests."""
