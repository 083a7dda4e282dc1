"""Report job resources."""
