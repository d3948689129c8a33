"""Version ingestion pipeline.

This package classifies change files, parses and tags their triples,
and drives one version append into the store.
"""
