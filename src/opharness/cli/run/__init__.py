"""Commands that start services and stacks."""
