"""Global middleware and error translation."""
