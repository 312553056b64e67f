"""Tests for :mod:`iotsa_auth.services`."""
