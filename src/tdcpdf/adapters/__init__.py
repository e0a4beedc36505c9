"""Adapters bridging the output format with external tools."""
