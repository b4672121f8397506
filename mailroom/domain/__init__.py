"""Domain package: all ORM models are imported here so Alembic autogenerate detects them.

Folder intent:
  organization.py  - Organization (tenant root) and MailRoom
  people.py        - UserProfile (internal) and ExternalPerson
  recipient.py     - RecipientRef tagged union + shared recipient columns
  mail_item.py     - MailItem, the central entity
  pickup.py        - Pickup events (one per mail item)
  notification.py  - Notification attempts (append-only)
  audit.py         - Immutable admin audit log
  integration.py   - Sync connector metadata
  enums.py         - String enumerations
  mixins.py        - Shared TimestampMixin, TenantMixin
"""

from mailroom.domain.audit import AuditLog
from mailroom.domain.integration import Integration
from mailroom.domain.mail_item import MailItem
from mailroom.domain.notification import Notification
from mailroom.domain.organization import MailRoom, Organization
from mailroom.domain.people import ExternalPerson, UserProfile
from mailroom.domain.pickup import Pickup

__all__ = [
    "AuditLog",
    "ExternalPerson",
    "Integration",
    "MailItem",
    "MailRoom",
    "Notification",
    "Organization",
    "Pickup",
    "UserProfile",
]
