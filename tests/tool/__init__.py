"""Tests for the cloud-provider-config command line tool."""
