"""Notification types and the rendered message handed to a channel."""

from enum import Enum

from pydantic import BaseModel


class NotificationType(Enum):
    ORDER_CONFIRMATION = "Order_Confirmation"
    ORDER_STATUS_UPDATE = "Order_Status_Update"
    ORDER_CANCELLATION = "Order_Cancellation"


class Notification(BaseModel):
    notification_type: NotificationType
    recipient: str
    subject: str
    body: str
