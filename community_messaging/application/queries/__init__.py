"""
QUERIES - Read operations (CQRS)

Queries retrieve data without modifying it, except that opening a
timeline marks its unread direct messages read for the viewer.

Subfolders:
- messaging/ → get_timeline, list_inbox
"""
