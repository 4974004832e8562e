"""Core library: parsing, chunking, storage, providers and ingestion."""
