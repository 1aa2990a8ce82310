"""Parsers for Cargo.lock files and Rust binaries built with cargo-auditable."""