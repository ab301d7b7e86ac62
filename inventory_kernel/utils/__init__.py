"""Utility functions for the inventory kernel."""

from inventory_kernel.utils.snapshots import canonicalize_json, decode_snapshot, encode_snapshot

__all__ = ["canonicalize_json", "encode_snapshot", "decode_snapshot"]
