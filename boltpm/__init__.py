"""Bolt package manager: manages bolt.toml and drives the Bolt compiler."""

__version__ = "0.1.0"
