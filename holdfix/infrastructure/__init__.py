"""Infrastructure: in-memory collaborators, reference router and snapshot I/O."""
