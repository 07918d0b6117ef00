"""
Runtime side of compiled aggregates: binding generated functions to the
Python operations they delegate to.
"""
from .binding import BindingError, BoundAggregate, bind
from .varlena import Varlena

__all__ = ['BindingError', 'BoundAggregate', 'bind', 'Varlena']
