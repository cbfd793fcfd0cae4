# traffic/broadcast.py
from channels.layers import get_channel_layer


def field_group(field_id) -> str:
    return f"field_{field_id}"


async def broadcast_to_field_async(field_id: int, payload: dict, msg_type: str = "traffic_update"):
    """
    Push a payload to every socket watching the field.
    """
    layer = get_channel_layer()
    await layer.group_send(
        field_group(field_id),
        {"type": msg_type, "message": payload},
    )
