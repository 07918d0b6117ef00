"""
Text syntax for aggregate declarations.
"""
from .aggregate_parser import AggregateParser, AggregateTransformer, aggregate_grammar

__all__ = ['AggregateParser', 'AggregateTransformer', 'aggregate_grammar']
