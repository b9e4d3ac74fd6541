"""Telegram bot message templates and constants.

Contains all user-facing message templates, usage hints and error messages.
Centralizes message management for a consistent chat experience.
"""

# Liveness
ALIVE_MESSAGE = (
    "✅ I'm alive! Send /newlambda to create a Lambda function, "
    "or /updateconfig <key> <value> to change its config."
)

# Authorization
NOT_AUTHORIZED_MESSAGE = "⛔ You are not authorized to use this bot."

# Provisioning progress
CREATING_MESSAGE = "⏳ Creating a unique Lambda function..."
CREATED_MESSAGE = "✅ Lambda function '{function_name}' created successfully."
FUNCTION_URL_MESSAGE = "🚀 Lambda Function URL: {function_url} (Publicly Accessible)"
STORED_MESSAGE = "💾 Config record '{key}' stored with value 0."
NOT_STORED_MESSAGE = "⚠️ Warning: the function was created but its config record was not stored."

# Provisioning errors
PREREQUISITE_MISSING_MESSAGE = "❌ {error}\n💡 {hint}"
PROVISIONING_ERROR_MESSAGE = "❌ Error creating Lambda function. Check logs. Error: {error}"

# Config updates
UPDATECONFIG_USAGE = "❌ Usage: /updateconfig <key-or-url> <integer value>"
NEWLAMBDA_USAGE = "❌ Usage: /newlambda [function-name]\n{error}"
CONFIG_NOT_FOUND_MESSAGE = "❌ No function found for '{key}'."
CONFIG_UPDATED_MESSAGE = "✅ Config for '{key}' updated to {value}.\n🔗 Endpoint: {endpoint}"
CONFIG_UPDATE_ERROR_MESSAGE = "❌ Error updating config. Check logs. Error: {error}"
UNKNOWN_ENDPOINT = "Unknown"
