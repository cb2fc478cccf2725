"""Test suite for clinic-notify."""
