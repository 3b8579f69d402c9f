import json
import logging

from channels.generic.websocket import AsyncWebsocketConsumer
from django.core.serializers.json import DjangoJSONEncoder

from clinic.realtime.broadcaster import broadcaster as default_broadcaster

logger = logging.getLogger(__name__)


class EventsConsumer(AsyncWebsocketConsumer):
    """Listener socket: a welcome on connect, then every broadcast event."""

    def __init__(self, *args, broadcaster=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.broadcaster = broadcaster or default_broadcaster

    async def connect(self):
        await self.accept()
        await self.broadcaster.on_connect(self)

    async def disconnect(self, close_code):
        self.broadcaster.unregister(self)
        logger.debug("Socket closed with code %s", close_code)

    async def receive(self, text_data=None, bytes_data=None):
        if not text_data:
            return
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            logger.warning("Ignoring non-JSON message from listener")
            return
        logger.info("Received from listener: %s", data)

    async def send_event(self, event):
        await self.send(text_data=json.dumps(event, cls=DjangoJSONEncoder))
