"""Commands that stop services and stacks."""
