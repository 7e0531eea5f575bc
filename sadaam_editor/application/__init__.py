"""Application layer - ports the core depends on."""

from .ports import ImageEditModel, EventPublisher, SessionEvent, SimpleEventPublisher

__all__ = ['ImageEditModel', 'EventPublisher', 'SessionEvent', 'SimpleEventPublisher']
