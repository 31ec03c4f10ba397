"""Dagster orchestration for granule discovery."""
