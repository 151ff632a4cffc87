"""Built-in CLI commands for apiservice.

Each sub-module defines a Typer command or sub-command group that is
registered on the root application in :mod:`apiservice.app`.
"""
