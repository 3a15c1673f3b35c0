"""Business-logic layer over the MongoDB collections.

- severity.py: severity tiers and due-distance text
- cadence.py: date/hours cadences and what dismiss/complete write
- alerts_scanner.py: due-item scan and feed ordering
- activity_service.py: recent activity feed
- component_actions.py: dismiss / quick-complete writes
- boats_service.py: accounts, boat access and entity CRUD (parts included)
- costs_service.py: spend summaries over costed log entries
"""
