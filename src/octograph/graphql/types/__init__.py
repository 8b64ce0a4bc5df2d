"""GitHub object and interface type descriptors."""
