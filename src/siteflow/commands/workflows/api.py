"""API client for site workflows."""

import logging
import re
from typing import Any

import requests

from siteflow.exceptions import APIError, ResourceNotFoundError, ValidationError

from .models import Workflow, parse_workflows

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://terminus.pantheon.io/api"
DEFAULT_TIMEOUT = 30

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)

# Site names are lowercase letters, digits and dashes
SITE_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*$")


class WorkflowRepository:
    """Fetch workflow snapshots for a site.

    Every fetch returns the complete current collection; the API has no
    delta or cursor endpoint, so callers derive changes by comparison.

    Parameters
    ----------
    token : str
        API access token
    base_url : str
        API base URL
    timeout : float | None
        Per-request timeout in seconds (None waits forever)
    session : requests.Session | None
        Session to reuse (default: a new session)
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            }
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        """Issue a GET request and decode the JSON body.

        Parameters
        ----------
        path : str
            Path relative to the base URL
        params : dict[str, str] | None
            Query parameters

        Returns
        -------
        Any
            Decoded JSON response

        Raises
        ------
        requests.HTTPError
            If the API returns an error status
        APIError
            If the response body is not valid JSON
        """
        url = f"{self.base_url}/{path}"
        logger.debug("GET %s params=%s", url, params)

        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()

        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"Malformed response: {e}", endpoint=path)

    def _fetch_collection(self, site_id: str, hydrate: str | None = None) -> list[Workflow]:
        params = {"hydrate": hydrate} if hydrate else None
        path = f"sites/{site_id}/workflows"
        records = self._get(path, params=params)

        if not isinstance(records, list):
            raise APIError("Expected a list of workflows", endpoint=path)

        workflows = parse_workflows(records)
        logger.debug("Fetched %d workflow(s) for site %s", len(workflows), site_id)
        return workflows

    def fetch_all(self, site_id: str) -> list[Workflow]:
        """Fetch all workflows for a site, without operations.

        Parameters
        ----------
        site_id : str
            Site UUID

        Returns
        -------
        list[Workflow]
            Workflows in server order
        """
        return self._fetch_collection(site_id)

    def fetch_with_operations(self, site_id: str) -> list[Workflow]:
        """Fetch all workflows for a site with their operations.

        Parameters
        ----------
        site_id : str
            Site UUID

        Returns
        -------
        list[Workflow]
            Workflows in server order, operations populated
        """
        return self._fetch_collection(site_id, hydrate="operations")

    def fetch_with_operations_and_logs(self, site_id: str) -> list[Workflow]:
        """Fetch all workflows for a site with operations and log output.

        Parameters
        ----------
        site_id : str
            Site UUID

        Returns
        -------
        list[Workflow]
            Workflows in server order, operations and logs populated
        """
        return self._fetch_collection(site_id, hydrate="operations_with_logs")

    def fetch_workflow_with_logs(self, site_id: str, workflow_id: str) -> Workflow:
        """Re-fetch a single workflow with operation log output.

        Parameters
        ----------
        site_id : str
            Site UUID
        workflow_id : str
            Workflow ID

        Returns
        -------
        Workflow
            Workflow with operations and logs populated

        Raises
        ------
        ResourceNotFoundError
            If the workflow does not exist
        """
        path = f"sites/{site_id}/workflows/{workflow_id}"
        try:
            record = self._get(path, params={"hydrate": "operations_with_logs"})
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                raise ResourceNotFoundError(f"No workflow found with ID {workflow_id}")
            raise

        if not isinstance(record, dict):
            raise APIError("Expected a workflow record", endpoint=path)
        return Workflow.from_dict(record)

    def resolve_site_id(self, site: str) -> str:
        """Resolve a site name to its UUID.

        Parameters
        ----------
        site : str
            Site name or UUID

        Returns
        -------
        str
            Site UUID (UUIDs are returned unchanged)

        Raises
        ------
        ValidationError
            If site is neither a UUID nor a valid site name
        ResourceNotFoundError
            If no site has the given name
        """
        if UUID_PATTERN.match(site):
            return site
        if not SITE_NAME_PATTERN.match(site):
            raise ValidationError(f"Invalid site name: {site!r}")

        path = f"site-names/{site}"
        try:
            record = self._get(path)
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                raise ResourceNotFoundError(f"Cannot find site named {site}")
            raise

        site_id = record.get("id") if isinstance(record, dict) else None
        if not site_id:
            raise APIError(f"No site ID returned for {site}", endpoint=path)
        return site_id
