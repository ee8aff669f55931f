import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

logger = logging.getLogger(__name__)

UPDATES_GROUP = 'updates'


def broadcast_transition(discharge_id: int, action: str, state: str, *, using: str = 'default') -> None:
    """Tell connected dashboards about a committed transition.

    Sent only once the surrounding transaction commits; a rolled back stage
    never reaches the channel layer.
    """
    event = {
        'type': 'discharge.updated',
        'dischargeId': discharge_id,
        'action': action,
        'state': state,
    }
    transaction.on_commit(lambda: _send(event), using=using)


def _send(event: dict) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    try:
        async_to_sync(channel_layer.group_send)(UPDATES_GROUP, event)
    except Exception:
        # The transition is already committed; dashboards fall back to polling.
        logger.exception('failed to broadcast %s for discharge %s', event['action'], event['dischargeId'])
