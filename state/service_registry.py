"""
Service Registry

Session-scoped singletons for repositories and services. Keeps
st.session_state out of the service/repository layers: factories live next
to the classes, caching of the instances lives here.
"""

import streamlit as st
from typing import TypeVar, Callable

T = TypeVar('T')

_REGISTRY_KEY = "_services"


def _registry() -> dict:
    if _REGISTRY_KEY not in st.session_state:
        st.session_state[_REGISTRY_KEY] = {}
    return st.session_state[_REGISTRY_KEY]


def get_service(service_name: str, factory: Callable[[], T]) -> T:
    """Get or create a service instance for this browser session.

    Example:
        def get_market_repository() -> MarketRepository:
            from state import get_service
            return get_service('market_repository', _create)
    """
    registry = _registry()
    if service_name not in registry:
        registry[service_name] = factory()
    return registry[service_name]


def register_service(service_name: str, instance: T) -> T:
    """Register a pre-configured instance (replaces any existing one)."""
    _registry()[service_name] = instance
    return instance


def clear_services(*service_names: str) -> None:
    """Drop services so they are re-created on next access (all if no names)."""
    registry = _registry()
    if not service_names:
        registry.clear()
        return
    for name in service_names:
        registry.pop(name, None)


def has_service(service_name: str) -> bool:
    return service_name in _registry()
