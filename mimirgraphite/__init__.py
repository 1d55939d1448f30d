"""Logfmt logging, typed errors with gRPC/HTTP mapping, and config helpers for Graphite-on-Mimir services."""

__version__ = "0.1.0"