"""jira-pm: Jira ticket tools for assistants (MCP) and the command line."""

__version__ = "1.0.0"
