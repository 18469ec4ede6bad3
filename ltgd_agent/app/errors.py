"""
Error taxonomy for the report pipeline.

Per-request failures derive from ReportError and are folded into a degraded
ReportResult by the report service. Configuration errors abort startup.
"""


class ReportError(Exception):
    """A failure while producing one report."""


class TransportError(ReportError):
    """The completion call failed (network, auth, quota, timeout)."""


class EmptyPayload(ReportError):
    """The completion came back without any text."""


class MalformedResponse(ReportError):
    """No usable JSON object could be read from the completion."""


class ChartDecodeWarning(UserWarning):
    """Chart content could not be decoded or validated; the chart is dropped."""


class ConfigurationError(RuntimeError):
    """Required configuration is missing at startup."""


class ConversationBusyError(RuntimeError):
    """A message was sent while another request is still pending."""


class ConversationClosedError(RuntimeError):
    """A message was sent after the conversation was closed."""
