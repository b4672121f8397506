"""Business logic layer.

Folder intent:
  lifecycle.py     - mail item status transition table
  mail_item.py     - intake, listings, manual status changes
  pickup.py        - atomic pickup recording
  notification.py  - notification recording (pending -> notified)
  insights.py      - dashboard aggregates, charts, activity feed
  organization.py  - organization settings and mail rooms
  recipients.py    - internal recipients and external people
  integration.py   - sync connector metadata
  audit.py         - audit trail writes and reads
  label_parser.py  - regex extraction from OCR'd label text
  label_ai.py      - OpenAI refinement of label extraction
  scan.py          - label scan orchestration

Rule: No FastAPI here. Services take (session, RequestContext), delegate all
SQL to repositories and raise AppException subclasses for rule violations.
"""
