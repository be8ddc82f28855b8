"""Scala runtime detection."""
