"""Telegram bot implementation package.

Contains the chat command dispatcher and the user-facing message templates.
Handles command parsing, the authorization gate and progress reporting for
provisioning runs.
"""
