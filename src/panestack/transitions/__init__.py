"""Transitions — lifecycle diff between view stacks and the prune timer."""
