"""Pydantic schemas package.

Folder intent:
  common.py        - CamelModel base + HealthResponse (all schemas inherit CamelModel)
  recipient.py     - uniform recipient summary, recipient reference in/out mixins, people DTOs
  mail_item.py     - intake, status change and mail item responses
  pickup.py        - pickup request/response
  notification.py  - notification request/response
  insights.py      - dashboard stats, charts, activity feed
  organization.py  - organization settings and mail rooms
  integration.py   - integration connectors and audit log entries
  scan.py          - label scan request/response
"""
