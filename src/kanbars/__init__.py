"""kanbars: a lightweight terminal kanban board for JIRA."""

import logging

__version__ = "0.3.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
