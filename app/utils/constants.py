from enum import Enum


class ResponseMessages:
    """Standard API response messages"""

    # Success messages
    SUCCESS = "Success"
    CREATED = "Created successfully"
    UPDATED = "Updated successfully"
    DELETED = "Deleted successfully"

    # Households
    HOUSEHOLD_CREATED = "Household created successfully"
    HOUSEHOLD_JOINED = "Joined household successfully"
    HOUSEHOLD_LEFT = "Left household successfully"
    MEMBER_REMOVED = "Member removed successfully"
    INVALID_HOUSEHOLD_CODE = "Invalid household code"

    # Tasks
    TASK_CREATED = "Task created successfully"
    TASK_UPDATED = "Task updated successfully"
    TASK_DELETED = "Task deleted successfully"
    TASK_COMPLETED = "The task has been marked as completed."
    TASK_REOPENED = "The task has been marked as pending."

    # Templates
    TEMPLATES_SEEDED = "Default templates created successfully"
    TEMPLATES_ALREADY_SEEDED = "Default templates already exist"

    # Auth
    REGISTERED = "Account created successfully! Please log in to continue."
    EMAIL_IN_USE = "This email is already registered. Please try logging in instead."
    PASSWORD_RESET_SENT = "Password reset email sent"


class AssistantMessages:
    """Fixed user-facing assistant texts"""

    HELPER_CANNOT_ADD = "Invalid command: Only managers can add tasks. 🦐"
    GENERIC_FAILURE = "Oops! 🦐 Something went wrong. Please try again!"
    MISSING_TASK_FIELDS = (
        "Sorry, I could not extract a valid task title or assignee from your message. 🦐"
    )
    PARSE_FAILURE = "Sorry, I could not parse the task details. Please try again! 🦐"
    NO_HOUSEHOLD = "You need to be part of a household before adding tasks. 🦐"
    TASK_ADDED = "Task added: {title} 🧽✨"
    FALLBACK_AFFIRMATION = "You are capable of amazing things! ✨"


class AssistantPrompts:
    CHAT_SYSTEM = (
        "You are Shrimpy, a cute vacuum shrimp who helps users clean, organize "
        "tasks, and stay motivated. Keep replies short, helpful, and fun. Use emojis "
        'like 🧽🦐✨. If the message starts with "/add", extract a task title, '
        "optional description, priority, category, assignee, dueDate (YYYY-MM-DD), "
        "dueTime (HH:mm), and optionally a repeat rule (daily, weekly on a specific "
        "day, or monthly on a specific date). Return the result as a JSON object."
    )
    AFFIRMATION_SYSTEM = (
        "You are an inspiring assistant. Provide a short, positive affirmation for "
        "the day. Keep it to one sentence. Be encouraging and uplifting. Do not "
        "include any prefixes like \"Here's an affirmation:\". Just return the "
        "affirmation text directly."
    )
    AFFIRMATION_USER = "Give me a daily affirmation."
    FIELD_SUGGESTION_SYSTEM = (
        "You help fill in household chores. Given a task title and description, "
        'reply with only a JSON object: {"priority": "low|medium|high", '
        '"category": string, "repeat": null | {"frequency": "daily"} | '
        '{"frequency": "weekly", "dayOfWeek": [weekday names]} | '
        '{"frequency": "monthly", "dayOfMonth": 1-31}}.'
    )
    FOLLOWUP_SYSTEM = (
        "You are Shrimpy, a household helper. Given a chore that was just "
        "completed, propose one sensible follow-up chore. Reply with only a JSON "
        'object: {"title": string, "description": string, "category": string, '
        '"priority": "low|medium|high", "reason": string, "daysFromNow": integer, '
        '"repeat": null | {"frequency": ...}}.'
    )


# Application Constants
class AppConstants:
    # Pagination
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100

    # Invite codes
    INVITE_CODE_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    INVITE_CODE_SUFFIX_LENGTH = 4
    MAX_INVITE_CODE_ATTEMPTS = 5

    # Validation Limits
    MAX_TITLE_LENGTH = 100
    MAX_DESCRIPTION_LENGTH = 500
    MAX_ASSIGNEES = 20

    # Assistant
    AFFIRMATION_MAX_TOKENS = 50
    DEFAULT_FOLLOWUP_DAYS = 7

    HOUSEHOLD_NAME_SUFFIX = "'s Household"
    UNNAMED_HOUSEHOLD = "Unnamed Household"
    UNKNOWN_MEMBER_NAME = "Unknown"


# Template Categories
class TemplateCategory(Enum):
    KITCHEN = "kitchen"
    BATHROOM = "bathroom"
    LAUNDRY = "laundry"
    LIVING = "living"
    BEDROOM = "bedroom"
    OUTDOOR = "outdoor"
    MAINTENANCE = "maintenance"
    SHOPPING = "shopping"


DEFAULT_TEMPLATE_CATEGORIES = [
    {
        "id": TemplateCategory.KITCHEN.value,
        "name": "Kitchen",
        "icon": "🍳",
        "color": "#f59e0b",
        "description": "Kitchen cleaning and meal prep tasks",
    },
    {
        "id": TemplateCategory.BATHROOM.value,
        "name": "Bathroom",
        "icon": "🚿",
        "color": "#3b82f6",
        "description": "Bathroom cleaning and maintenance",
    },
    {
        "id": TemplateCategory.LAUNDRY.value,
        "name": "Laundry",
        "icon": "👕",
        "color": "#8b5cf6",
        "description": "Laundry and clothing care",
    },
    {
        "id": TemplateCategory.LIVING.value,
        "name": "Living Areas",
        "icon": "🛋️",
        "color": "#10b981",
        "description": "Living room, dining room, and common areas",
    },
    {
        "id": TemplateCategory.BEDROOM.value,
        "name": "Bedrooms",
        "icon": "🛏️",
        "color": "#ec4899",
        "description": "Bedroom cleaning and organization",
    },
    {
        "id": TemplateCategory.OUTDOOR.value,
        "name": "Outdoor",
        "icon": "🌳",
        "color": "#059669",
        "description": "Yard work and outdoor maintenance",
    },
    {
        "id": TemplateCategory.MAINTENANCE.value,
        "name": "Maintenance",
        "icon": "🔧",
        "color": "#6b7280",
        "description": "Home maintenance and repairs",
    },
    {
        "id": TemplateCategory.SHOPPING.value,
        "name": "Shopping",
        "icon": "🛒",
        "color": "#f97316",
        "description": "Grocery and household shopping",
    },
]


DEFAULT_TEMPLATES = [
    {
        "title": "Kitchen Deep Clean",
        "description": "Thorough kitchen cleaning including appliances, counters, and floors",
        "category": TemplateCategory.KITCHEN.value,
        "priority": "medium",
        "estimated_time": 45,
        "room": "Kitchen",
        "supplies": ["All-purpose cleaner", "Dish soap", "Microfiber cloths", "Sponge"],
        "steps": [
            "Clear and wipe down all countertops",
            "Clean inside and outside of microwave",
            "Wipe down refrigerator exterior",
            "Clean stovetop and oven",
            "Sweep and mop floors",
            "Take out trash and recycling",
        ],
    },
    {
        "title": "Bathroom Clean",
        "description": "Complete bathroom cleaning and sanitization",
        "category": TemplateCategory.BATHROOM.value,
        "priority": "medium",
        "estimated_time": 30,
        "room": "Bathroom",
        "supplies": ["Bathroom cleaner", "Toilet cleaner", "Glass cleaner", "Towels"],
        "steps": [
            "Clean toilet bowl and seat",
            "Wipe down sink and counter",
            "Clean shower/tub",
            "Wipe down mirrors",
            "Sweep and mop floors",
            "Restock toiletries",
        ],
    },
    {
        "title": "Laundry Day",
        "description": "Complete laundry cycle including washing, drying, and folding",
        "category": TemplateCategory.LAUNDRY.value,
        "priority": "low",
        "estimated_time": 120,
        "room": "Laundry Room",
        "supplies": ["Laundry detergent", "Fabric softener", "Dryer sheets"],
        "steps": [
            "Sort clothes by color and fabric type",
            "Load washing machine",
            "Transfer to dryer when complete",
            "Fold and organize clean clothes",
            "Put away in appropriate locations",
        ],
    },
    {
        "title": "Living Room Tidy",
        "description": "Quick living room organization and surface cleaning",
        "category": TemplateCategory.LIVING.value,
        "priority": "low",
        "estimated_time": 20,
        "room": "Living Room",
        "supplies": ["Dust cloth", "Vacuum cleaner"],
        "steps": [
            "Pick up and organize items",
            "Dust surfaces and furniture",
            "Vacuum carpets and floors",
            "Fluff pillows and straighten cushions",
            "Empty trash bins",
        ],
    },
    {
        "title": "Grocery Shopping",
        "description": "Weekly grocery shopping trip",
        "category": TemplateCategory.SHOPPING.value,
        "priority": "high",
        "estimated_time": 60,
        "room": "Kitchen",
        "supplies": ["Shopping list", "Reusable bags"],
        "steps": [
            "Check pantry and refrigerator",
            "Create shopping list",
            "Visit grocery store",
            "Purchase items on list",
            "Unpack and organize groceries",
        ],
    },
]
