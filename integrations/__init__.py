"""External collaborators: caller identity, quota gate and channel metadata."""

from .auth import AuthenticatedUser, HeaderAuthenticator, USER_ID_HEADER
from .quota import PlanQuotaGate, QuotaDecision, UNLIMITED
from .youtube import ChannelSnapshot, YouTubeChannelSource, build_channel_analytics

__all__ = [
    "AuthenticatedUser",
    "ChannelSnapshot",
    "HeaderAuthenticator",
    "PlanQuotaGate",
    "QuotaDecision",
    "UNLIMITED",
    "USER_ID_HEADER",
    "YouTubeChannelSource",
    "build_channel_analytics",
]
