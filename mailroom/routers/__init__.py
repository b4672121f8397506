"""Routers package: HTTP endpoint definitions, all mounted under /api.

Files:
  mail_items.py     - intake, pending/history/recent listings, dashboard stats, status changes
  pickups.py        - pickup recording
  notifications.py  - notification recording
  insights.py       - distribution, mail volume, busiest periods, recent activity
  scan.py           - shipping label scan
  organizations.py  - organization settings and mail rooms
  recipients.py     - internal recipients and external people
  integrations.py   - integration connectors and audit log

Rule: Routers only handle HTTP (request parsing, response shaping).
      All business logic delegates to mailroom/services/.
"""
