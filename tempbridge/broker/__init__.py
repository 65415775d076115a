"""MQTT broker package for tempbridge."""

from .publisher import BrokerPublisher

__all__ = ["BrokerPublisher"]
