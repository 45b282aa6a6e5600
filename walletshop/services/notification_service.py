# walletshop/services/notification_service.py
from walletshop.celery_worker import celery_app
from walletshop.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysylania powiadomien.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(wallet_code: str, order_id: int, line_count: int):
        """
        Powiadomienie o zapisanym zamowieniu walleta.
        Wolane dopiero po commicie.
        """
        send_order_notification_task.delay(wallet_code, order_id, line_count)


@celery_app.task(name="walletshop.services.notification_service.send_order_notification_task")
def send_order_notification_task(wallet_code: str, order_id: int, line_count: int):
    logger.info(f"[NOTIFICATION] Wallet {wallet_code}: order {order_id} pending with {line_count} line(s)")
    return {"wallet_code": wallet_code, "order_id": order_id, "status": "sent"}
