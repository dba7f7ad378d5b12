"""Drink-mixing machine controller: recipe database, order queue, admin TCP service and client."""

__version__ = "0.1.0"