"""
Command Handlers package.

This package contains the Telegram handlers of the concierge bot:
- start_handler: Handles the /start command
- cancel_handler: Handles the /cancel command
- forget_handler: Handles the /forget command
- turn_handler: Routes plain text messages to the turn dispatcher
"""
