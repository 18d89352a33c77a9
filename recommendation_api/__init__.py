"""Recommendation API: breaker-protected composition of recommendations."""
