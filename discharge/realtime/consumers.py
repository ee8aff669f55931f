import json
from channels.generic.websocket import AsyncWebsocketConsumer

from discharge.services.notify import UPDATES_GROUP


class UpdatesConsumer(AsyncWebsocketConsumer):
    """Pushes committed discharge pipeline transitions to dashboards."""
    GROUP = UPDATES_GROUP

    async def connect(self):
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def discharge_updated(self, event):
        # event: {"type": "discharge.updated", "dischargeId": int, "action": "...", "state": "..."}
        await self.send(json.dumps(event))
