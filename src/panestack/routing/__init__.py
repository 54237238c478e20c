"""Routing — compiled route table, layout chains, and error handlers.

Routes are matched in registration order; the first structural match wins.
"""
