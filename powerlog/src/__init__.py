"""powerlog application package."""
