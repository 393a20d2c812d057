"""Resource services for the Campaign Management API.

Each service is a thin wrapper over :class:`~asacli.client.APIClient`: it
supplies the URL path and the payload type, nothing more.  Pagination of
``find`` endpoints is delegated to :func:`~asacli.client.fetch_all`.
"""

from asacli.services.acls import ACLService
from asacli.services.adgroups import AdGroupService
from asacli.services.campaigns import CampaignService
from asacli.services.keywords import KeywordService
from asacli.services.reports import ReportingService

__all__ = [
    "ACLService",
    "AdGroupService",
    "CampaignService",
    "KeywordService",
    "ReportingService",
]
