"""Application layer: collaborator interfaces and batch services."""
