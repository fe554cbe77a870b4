"""Test suite for circlr."""
