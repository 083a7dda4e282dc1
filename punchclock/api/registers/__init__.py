"""Time register and clock action resources."""
