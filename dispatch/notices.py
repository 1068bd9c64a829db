class DashboardNotice(Exception):
    """
    A user-facing rejection of a dashboard action.
    Raised before anything is committed, so the store is unchanged.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
