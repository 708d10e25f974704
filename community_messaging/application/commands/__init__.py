"""
COMMANDS - Write operations (CQRS)

Every send is: validate → append (all-or-nothing) → dispatch one
best-effort notification → return the normalized entry.

Subfolders:
- messaging/ → send_direct_message, submit_inquiry, respond_to_inquiry,
               send_followup, mark_conversation_read
"""
