# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets; keep them in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "JOKEBOT_APP_NAME": "App display name (default: jokebot).",
    "JOKEBOT_LOG_LEVEL": "Console logging level (default: INFO). The file log is always DEBUG.",
    # Connectors (Matrix wins when both are enabled)
    "JOKEBOT_CONSOLE_ENABLED": "Enable console connector (true/false, default: true).",
    "JOKEBOT_MATRIX_ENABLED": "Enable Matrix connector (true/false, default: false).",
    # Scheduling
    "JOKEBOT_TICK_SECONDS": "Seconds between delivery passes (default: 60).",
    "JOKEBOT_PACING_MS": "Delay after each delivery attempt in ms (default and minimum: 100).",
    # Content source
    "JOKEBOT_JOKE_API_ENABLED": "Fetch jokes over HTTP (true) or use built-in jokes (false).",
    "JOKEBOT_JOKE_API_URL": "Random joke endpoint (default: official-joke-api.appspot.com).",
    "JOKEBOT_JOKE_API_TIMEOUT_SECONDS": "Timeout for one joke request (default: 5).",
    # Matrix
    "JOKEBOT_MATRIX_HOMESERVER": "Matrix homeserver URL.",
    "JOKEBOT_MATRIX_USER_ID": "Matrix user ID (bot).",
    "JOKEBOT_MATRIX_PASSWORD": "Password for first login (session stored locally).",
    "JOKEBOT_MATRIX_ROOMS": "Optional allowlist of room IDs (empty => all rooms).",
    # Paths (gitignored)
    "JOKEBOT_DATA_DIR": "Local data directory (default: .local/jokebot).",
    "JOKEBOT_MATRIX_STORE_PATH": "Matrix session directory (default: <data_dir>/matrix_store).",
    "JOKEBOT_SUBSCRIBERS_DB_PATH": "SubscriberStore SQLite path (default: <data_dir>/subscribers.sqlite3).",
}
