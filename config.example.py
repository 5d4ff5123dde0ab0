# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
See src/taskmate/config.py for parsing rules and defaults.
"""

ENV_VARS = {
    # App / logging
    "TASKMATE_APP_NAME": "App display name (default: TaskMate).",
    "TASKMATE_LOG_LEVEL": "Console logging level (default: WARNING). The log file always gets DEBUG.",
    # Paths (gitignored)
    "TASKMATE_DATA_DIR": "Local data directory (default: .local/taskmate).",
    "TASKMATE_DB_PATH": "Key-value SQLite path holding tasks and theme (default: <data_dir>/taskmate.sqlite3).",
    "TASKMATE_LOG_DIR": "Directory for taskmate.log (default: <data_dir>).",
    "TASKMATE_EXPORT_DIR": "Where /export writes mytasks.json (default: current directory).",
    # Focus timer
    "TASKMATE_FOCUS_MINUTES": "Default session length in minutes (default: 25).",
    "TASKMATE_TIMER_PRESETS": "Comma/space separated preset minutes shown by /timer (default: 15,25,45).",
    "TASKMATE_TICK_SECONDS": "Seconds between timer ticks (default: 1.0).",
    # Behaviour
    "TASKMATE_CONFIRM_DELETE": "Ask before deleting a task (true/false, default: true).",
}
