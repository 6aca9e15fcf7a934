"""HTTP transport package."""
