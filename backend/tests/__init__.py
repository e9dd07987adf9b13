"""Test suite for the SeaFood delivery backend."""
