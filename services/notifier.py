import logging

logger = logging.getLogger(__name__)

NEW_MESSAGE_EVENT = "new_message"


class Notifier:
    """Publish capability handed to services that announce new activity."""

    def emit(self, channel, payload):
        raise NotImplementedError


class SocketIONotifier(Notifier):
    """Fans events out to Socket.IO clients joined to the channel room."""

    def __init__(self, socketio, event=NEW_MESSAGE_EVENT):
        self.socketio = socketio
        self.event = event

    def emit(self, channel, payload):
        self.socketio.emit(self.event, payload, to=channel)
        logger.info("Notification emitted to %s", channel)


class NullNotifier(Notifier):
    def emit(self, channel, payload):
        logger.debug("Notification to %s dropped (no notifier configured)", channel)


def agent_channel(agent_id):
    return f"agent:{agent_id}"
