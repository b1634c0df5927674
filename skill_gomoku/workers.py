import logging

logger = logging.getLogger(__name__)

def _notification_queue_consumer(socketio_instance, queue_instance):
    """
    Background consumer for the notification queue. Takes notifications
    produced off the request path (eviction timers) and emits them.
    """
    logger.info("[QueueConsumer] Consumer started.")
    while True:
        try:
            msg = queue_instance.get()
            if msg is None:
                logger.info("[QueueConsumer] Received None, shutting down.")
                break

            event = msg.get('event')
            payload = msg.get('payload', {})
            room = msg.get('room')

            if not event or not room:
                logger.warning(f"[QueueConsumer] Skipping invalid message: {msg}")
                continue

            socketio_instance.emit(event, payload, room=room)

        except Exception as e:
            logger.error(f"[QueueConsumer] Unexpected error in consumer: {e}", exc_info=True)
            socketio_instance.sleep(1)

def start_notification_consumer(socketio_instance, queue_instance):
    """Starts the consumer from create_app."""
    socketio_instance.start_background_task(
        target=_notification_queue_consumer,
        socketio_instance=socketio_instance,
        queue_instance=queue_instance
    )
