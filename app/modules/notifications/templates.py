"""
Admin ping templates.
Each template supplies the default title, body and the client tab the
notification opens. custom_announcement has no default body.
"""

ADMIN_PING_TEMPLATES = {
    "bed_signup_reminder": {
        "title": "Bed Sign-Up Reminder",
        "default_body": "Don't forget to claim your bed for the weekend!",
        "icon": "bed",
        "deep_link_tab": "calendar",
    },
    "expense_reminder": {
        "title": "Expense Reminder",
        "default_body": "Please review outstanding expenses and settle up.",
        "icon": "credit-card",
        "deep_link_tab": "expenses",
    },
    "calendar_reminder": {
        "title": "Calendar Reminder",
        "default_body": "New events have been added to the calendar.",
        "icon": "calendar",
        "deep_link_tab": "calendar",
    },
    "itinerary_update": {
        "title": "Itinerary Update",
        "default_body": "The trip itinerary has been updated.",
        "icon": "map",
        "deep_link_tab": "itinerary",
    },
    "bulletin_update": {
        "title": "Bulletin Update",
        "default_body": "New post on the bulletin board - check it out!",
        "icon": "thumb-tack",
        "deep_link_tab": "home",
    },
    "custom_announcement": {
        "title": "Custom Announcement",
        "default_body": "",
        "icon": "bullhorn",
        "deep_link_tab": "home",
    },
}


def get_template(ping_type: str):
    return ADMIN_PING_TEMPLATES.get(ping_type)
