"""Commands that inspect the composition files."""
