"""Icons and labels used across the UI."""

ICON_TICKET = "🎫"
ICON_USER = "👤"
ICON_COMMENT = "💬"
ICON_SYNC_IDLE = "✅"
ICON_SYNC_PENDING = "⏳"
ICON_SYNC_FAILED = "⚠️"

PRIORITY_ICONS = {
    1: "🟢",
    2: "🟡",
    3: "🟠",
    4: "🔴",
    5: "🚨",
}

TICKET_KINDS = [
    ("Technical problem", 1),
    ("Access request", 2),
    ("System error", 3),
    ("General question", 4),
    ("Software reinstall", 5),
]

PRIORITIES = [
    ("Low", 1),
    ("Medium", 2),
    ("High", 3),
    ("Critical", 4),
    ("Urgent", 5),
]

DEPARTMENTS = [
    ("IT", 1),
    ("Human resources", 2),
    ("Finance", 3),
    ("Operations", 4),
]

EMPTY_COLUMN_HINT = "Drag a ticket here"
