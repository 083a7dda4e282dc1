"""Staff directory resources."""
