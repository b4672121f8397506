"""String enumerations stored in the mailroom tables."""

import enum


class Role(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"
    RECIPIENT = "recipient"


class Carrier(str, enum.Enum):
    UPS = "ups"
    FEDEX = "fedex"
    USPS = "usps"
    DHL = "dhl"
    AMAZON = "amazon"
    OTHER = "other"


class MailItemType(str, enum.Enum):
    PACKAGE = "package"
    LETTER = "letter"
    LARGE_PACKAGE = "large_package"
    ENVELOPE = "envelope"
    PERISHABLE = "perishable"
    SIGNATURE_REQUIRED = "signature_required"
    OTHER = "other"


class MailItemStatus(str, enum.Enum):
    PENDING = "pending"
    NOTIFIED = "notified"
    PICKED_UP = "picked_up"
    RETURNED_TO_SENDER = "returned_to_sender"
    LOST = "lost"
    OTHER = "other"


class NotificationType(str, enum.Enum):
    EMAIL = "email"
    SMS = "sms"
    APP = "app"
    OTHER = "other"


class NotificationStatus(str, enum.Enum):
    SENT = "sent"
    DELIVERED = "delivered"
    FAILED = "failed"
    PENDING = "pending"


class IntegrationType(str, enum.Enum):
    CSV = "csv"
    API = "api"
    OTHER = "other"


class AuditAction(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    LOGIN = "login"
    LOGOUT = "logout"
    OTHER = "other"


STAFF_ROLES = (Role.ADMIN, Role.MANAGER, Role.STAFF)
ADMIN_ROLES = (Role.ADMIN, Role.MANAGER)
