"""Realtime change notifications -- broadcast hub and WebSocket adapter."""

from tonish.realtime.hub import Client, Hub, Message, MessageType, is_recipient

__all__ = ["Client", "Hub", "Message", "MessageType", "is_recipient"]
