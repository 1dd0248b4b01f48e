class WeeklineError(Exception):
    """Base exception for Weekline application."""

    pass


class BillingNotConfiguredError(WeeklineError):
    """Raised when a required Stripe setting is missing."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"Missing {setting.upper()}")


class PDFRenderError(WeeklineError):
    """Raised when the PDF renderer fails to produce a document."""

    pass
