"""Compiled regular expressions shared across the package."""

import re

# "work item 12345:associate" / "workitem #12345: resolve", one per line
WORK_ITEM_PATTERN = re.compile(
    r"^[ \t]*work[ \t-]?item[ \t]*#?(?P<item_id>\d+)[ \t]*:[ \t]*(?P<action>associate|resolve)[ \t]*\r?$",
    re.IGNORECASE | re.MULTILINE,
)

# "force: <reason>" on its own line
FORCE_PATTERN = re.compile(
    r"^[ \t]*force:[ \t]*(?P<reason>[^\r\n]*?)[ \t]*\r?$",
    re.IGNORECASE | re.MULTILINE,
)

# Value of the --work-item command line option: "12345" or "12345:resolve"
WORK_ITEM_OPTION_PATTERN = re.compile(r"^(?P<item_id>\d+)(?::(?P<action>associate|resolve))?$")

# Trailer written into commits that mirror a remote changeset
CHANGESET_TRAILER_PATTERN = re.compile(
    r"^gitcentral-id:[ \t]*\[(?P<url>[^\]]*)\](?P<path>[^;\r\n]*);C(?P<changeset_id>\d+)[ \t]*\r?$",
    re.MULTILINE,
)
