"""Catalog export pipeline: fetch, normalize and persist snapshots."""
