"""Core: configuration, domain and services. No printing, no SDK calls."""
