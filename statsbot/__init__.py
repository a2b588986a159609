"""statsbot: Discord bot for GitHub pull-request and issue stats.

Reports an account's open, merged and assigned activity, scores merged PRs
by their level labels, and compares two accounts side by side.
"""

__version__ = "0.1.0"
