import structlog

from cycling_events.exceptions import ConfigurationError
from cycling_events.models import Source, SourceParams, SourceResult, StravaParams
from cycling_events.scraper import Scraper
from cycling_events.sources.base_source import BaseSource

logger = structlog.get_logger(__name__)


class StravaSource(BaseSource):
    """Strava club events.

    Strava only exposes events through its OAuth API. Without an access token
    the source reports itself as not configured; with one it still returns no
    events because the OAuth flow is not implemented. It never makes a request.
    """

    source = Source.STRAVA

    async def fetch_events(
        self, scraper: Scraper, params: SourceParams = None
    ) -> SourceResult:
        area = params if isinstance(params, StravaParams) else StravaParams()
        log = logger.bind(
            source=str(self.source), lat=area.lat, lng=area.lng, radius=area.radius
        )

        if not scraper.config.strava_access_token:
            error = ConfigurationError(
                "Strava events require an API access token",
                parameter="STRAVA_ACCESS_TOKEN",
                suggestion="Set STRAVA_ACCESS_TOKEN or leave the Strava source disabled.",
            )
            log.info("source_not_configured", **error.to_dict())
            return SourceResult.failed(self.source, error.message)

        log.info("source_not_supported", reason="strava_oauth_not_implemented")
        return SourceResult.failed(
            self.source, "Strava event access is not implemented"
        )
