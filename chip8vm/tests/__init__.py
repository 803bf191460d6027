"""Tests for the CHIP-8 interpreter core."""
