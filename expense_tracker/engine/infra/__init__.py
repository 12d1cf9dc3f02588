"""Filesystem and environment helpers."""
