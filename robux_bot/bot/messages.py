"""Bot message templates and constants.

Contains all user-facing titles, labels, descriptions and error messages.
Centralizes message management for a consistent user experience across
commands.
"""

# Titles
PRICE_TITLE = "Price Calculation"
CONVERT_TITLE = "Currency Conversion"
ROBUX_TITLE = "Robux Calculation"
HELP_TITLE = "Available Commands"

# Price command
PRICE_DESCRIPTION = "Conversion Type: {kind}\nAmount of Robux: {robux_amount}"
GAMEPASS_PRICE_LABEL = "Gamepass Price"
AMOUNT_IN_LABEL = "Amount in {currency}"

# Robux command
ROBUX_DESCRIPTION = "{source} affords {robux_amount} R$ ({other})"

# Value formats
ROBUX_VALUE = "{amount} R$"
MONEY_VALUE = "{symbol}{amount:.2f}"

# Footer
FOOTER_TEXT = "Powered by {bot_name}"

# Help
HELP_HEADER = "Here are the available commands and their usage:"
HELP_LINE = "{usage}: {description}"

# Errors
ERROR_PREFIX = "❌ {message}"
ERROR_UNEXPECTED = "Something went wrong while handling the command. Please try again later."
