"""
handlers/ - Message Handlers

Contains:
- command_handler.py: CommandExecutor (parsed command -> reply text)
"""

from .command_handler import CommandExecutor, FAILURE_REPLIES
