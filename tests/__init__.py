"""Tests for cloud-provider-config."""
