# traffic/consumers.py
import logging
from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .broadcast import field_group
from .encoding import badge
from .exceptions import ReportFetchError
from .services import field_consensus

logger = logging.getLogger(__name__)


@database_sync_to_async
def load_consensus_payload(field_id):
    result, snapshot = field_consensus(field_id)
    payload = badge(result)
    payload["field_id"] = int(field_id)
    payload["computed_at"] = snapshot.fetched_at.isoformat()
    return payload


class FieldTrafficConsumer(AsyncJsonWebsocketConsumer):
    async def connect(self):
        self.field_id = self.scope['url_route']['kwargs']['field_id']
        self.group_name = field_group(self.field_id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        await self.send_json({"type": "info", "message": f"Watching traffic for field {self.field_id}"})

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.group_name, self.channel_name)

    # Channels maps "type": "traffic_update" -> method name "traffic_update"
    async def traffic_update(self, event):
        await self.send_json({"type": "traffic", "data": event.get("message")})

    async def receive_json(self, content):
        cmd = content.get("cmd")
        if cmd == "get_consensus":
            try:
                payload = await load_consensus_payload(self.field_id)
            except ReportFetchError as e:
                logger.warning(f"Socket consensus request for field {self.field_id} failed: {e}")
                await self.send_json({"type": "error", "message": "Could not load traffic reports."})
                return
            await self.send_json({"type": "traffic", "data": payload})
        else:
            await self.send_json({"type": "error", "message": f"Unknown command '{cmd}'"})
