"""Progress messages printed during replay."""


class Messages:
    """Lines written to the console, in the order a run produces them."""

    FETCHING_CHANGES = "Fetching changes from the remote to minimize possibility of late conflict..."
    STARTING_CHECKIN_0_1 = "Starting checkin of {0} '{1}'"
    DONE_WITH_0 = "Done with {0}."
    DONE_WITH_0_REBASING = "Done with {0}, rebasing tail onto new remote commit..."
    REBASE_DONE = "Rebase done successfully."
    NO_MORE = "No more to checkin."
