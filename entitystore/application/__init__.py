"""Application layer: DTOs, ports and entity services."""
