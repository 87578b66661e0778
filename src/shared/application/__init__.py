"""
Shared Application Layer
Command/query contracts and handlers
"""
from shared.application.base_command import BaseCommand
from shared.application.base_query import BaseQuery
from shared.application.command_handler import CommandHandler
from shared.application.query_handler import QueryHandler

__all__ = [
    "BaseCommand",
    "BaseQuery",
    "CommandHandler",
    "QueryHandler",
]
