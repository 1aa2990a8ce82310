"""Parsers that list libraries and dependencies from lock files and auditable Rust binaries."""

__version__ = "0.1.0"