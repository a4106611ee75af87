# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting.
"""

ENV_VARS = {
    # App / logging
    "TASKTRACKER_APP_NAME": "App display name (default: TaskTracker).",
    "TASKTRACKER_LOG_LEVEL": "Console logging level (default: WARNING; the log file always gets DEBUG).",
    # Storage
    "TASKTRACKER_DATA_DIR": "Local data directory (default: .local/tasktracker).",
    "TASKTRACKER_STORAGE": "Storage backend: json | sqlite (default: json).",
    "TASKTRACKER_TASKS_JSON_PATH": "Task list JSON file (default: <data_dir>/tasks.json).",
    "TASKTRACKER_TASKS_DB_PATH": "Task list SQLite file (default: <data_dir>/tasks.sqlite3).",
    # Reminders
    "TASKTRACKER_REMINDERS_ENABLED": "Run the reminder loop (true/false, default: true).",
    "TASKTRACKER_NOTIFICATIONS_PERMITTED": (
        "Answer to the startup permission request (true/false, default: true). "
        "When false, reminders are accepted but never fire."
    ),
    "TASKTRACKER_REMINDER_POLL_SECONDS": "Reminder loop polling interval (default: 1.0).",
}
