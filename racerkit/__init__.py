"""Cargo metadata mapping, source chunking, type and pattern models, and output formatting for Rust code completion."""

__version__ = "0.1.0"