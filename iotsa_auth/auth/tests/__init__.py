"""Tests for :mod:`iotsa_auth.auth`."""
