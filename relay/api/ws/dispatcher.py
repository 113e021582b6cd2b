import time

from relay.api.ws.connection import Connection
from relay.exceptions import RecipientUnavailable
from relay.logging import logger
from relay.managers.connection_registry import ConnectionRegistry
from relay.schemas.envelope import Envelope
from relay.utils.metrics import (
    ws_broadcast_duration_seconds,
    ws_deliveries_total,
    ws_messages_broadcast_total,
)


class BroadcastDispatcher:
    """
    Fans validated envelopes out to every registered peer but the sender.

    Delivery is best-effort and at-most-once: a recipient that cannot take
    the frame right now is skipped, nothing is queued or retried.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self.registry = registry

    async def broadcast(self, sender: Connection, envelope: Envelope) -> int:
        """
        Send `envelope` to all registered connections except `sender`.

        Recipients are sent to concurrently. A failing recipient never
        aborts delivery to the others and its error is not propagated.

        Args:
            sender: Connection the envelope was received from.
            envelope: Validated envelope to relay.

        Returns:
            int: Number of recipients that accepted the frame.
        """
        text = envelope.to_wire()
        start_time = time.time()

        async def deliver(recipient: Connection) -> bool:
            try:
                await recipient.send_text(text)
            except RecipientUnavailable as ex:
                logger.debug(f"Skipped {recipient}: {ex.message}")
                ws_deliveries_total.labels(outcome="skipped").inc()
                return False

            ws_deliveries_total.labels(outcome="delivered").inc()
            return True

        results = await self.registry.for_each_except(sender, deliver)

        ws_messages_broadcast_total.inc()
        ws_broadcast_duration_seconds.observe(time.time() - start_time)

        delivered = sum(results)
        logger.debug(
            f"Broadcast '{envelope.type}' from {sender} to "
            f"{delivered}/{len(results)} recipients"
        )
        return delivered
