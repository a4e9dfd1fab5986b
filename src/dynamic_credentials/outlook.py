"""
Microsoft Graph (Outlook) request helpers with dynamic credentials.

A node can take its Graph token from stored OAuth2 credentials or, with
``credentialsSource = "dynamic"``, from a field of the incoming item's JSON
(``credentials`` by default). Missing dynamic data falls back to the stored
credentials.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Sequence, Union

from dynamic_credentials.config.settings import GraphConfig
from dynamic_credentials.exceptions import (
    CredentialResolutionError,
    GraphApiError,
    HttpRequestError,
)
from dynamic_credentials.models import (
    BinaryData,
    CredentialSource,
    NodeItem,
    OAuth2Credential,
    RequestDescriptor,
)
from dynamic_credentials.parameters import ParameterStore
from dynamic_credentials.provider import CredentialProvider, StaticCredentialProvider, StaticLookup
from dynamic_credentials.transport import HttpClient, HttpResponse

logger = logging.getLogger(__name__)

InputItem = Union[NodeItem, Mapping[str, Any]]


def _item_json(item: InputItem) -> Mapping[str, Any] | None:
    if isinstance(item, NodeItem):
        return item.json
    return item.get("json")


def prepare_api_error(error: HttpRequestError) -> HttpRequestError:
    """
    Turn a generic "bad request"/"unknown error" failure into a readable one.

    Graph puts the useful message in the response body
    (``{"error": {"code": ..., "message": ...}}``). Other errors are returned
    unchanged.
    """
    message = (error.message or "").lower()
    if not error.description or ("bad request" not in message and "unknown error" not in message):
        return error
    try:
        payload = json.loads(error.description)
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        details = payload["error"]
        return GraphApiError(
            details.get("message") or error.message,
            status_code=error.status_code,
            code=details.get("code", ""),
        )
    return HttpRequestError(error.description, status_code=error.status_code)


class MicrosoftGraphClient:
    """
    Outlook helpers over the Graph API.

    Args:
        parameters: Node parameter store.
        http: Client that executes request descriptors.
        credentials: Stored-credential provider, or the host's lookup callable.
        input_items: The node's input items, read for dynamic credentials.
        config: Graph settings.
    """

    def __init__(
        self,
        parameters: ParameterStore,
        http: HttpClient,
        credentials: CredentialProvider | StaticLookup,
        input_items: Sequence[InputItem] = (),
        config: GraphConfig | None = None,
    ):
        self.parameters = parameters
        self.http = http
        if isinstance(credentials, CredentialProvider):
            self.credentials = credentials
        else:
            self.credentials = StaticCredentialProvider(credentials)
        self.input_items = list(input_items)
        self.config = config or GraphConfig()

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    def _dynamic_credentials(self, item_index: int) -> Mapping[str, Any]:
        cfg = self.config
        key = self.parameters.get_string(
            cfg.credentials_parameter, item_index, cfg.default_credentials_key
        )
        if item_index >= len(self.input_items):
            raise CredentialResolutionError(
                ValueError("No input data available for dynamic credentials")
            )
        data = _item_json(self.input_items[item_index]) or {}
        if not isinstance(data, Mapping):
            raise CredentialResolutionError(
                TypeError(f"Input item {item_index} JSON is not an object")
            )
        credentials = data.get(key)
        if not credentials:
            raise CredentialResolutionError(
                ValueError(f'No credentials found in input data with parameter name "{key}"')
            )
        return credentials

    def resolve_credentials(self, item_index: int = 0) -> tuple[Any, CredentialSource]:
        """Return the credentials for an item and where they came from."""
        try:
            source = self.parameters.get_parameter(
                self.config.source_parameter, item_index, CredentialSource.STATIC.value
            )
            if source == CredentialSource.DYNAMIC.value:
                return self._dynamic_credentials(item_index), CredentialSource.DYNAMIC
        except Exception as e:
            logger.warning(
                "Dynamic Graph credentials unavailable for item %d, using stored credentials: %s",
                item_index,
                e,
            )
        credentials = self.credentials.get_credentials(self.config.credential_type_name, item_index)
        return credentials, CredentialSource.STATIC

    @staticmethod
    def _authorization(credentials: Any) -> str:
        if isinstance(credentials, OAuth2Credential):
            return credentials.authorization_header()
        token = None
        if isinstance(credentials, Mapping):
            token_data = credentials.get("oauthTokenData")
            if isinstance(token_data, Mapping):
                token = token_data.get("access_token")
            token = token or credentials.get("access_token") or credentials.get("accessToken")
        if not token:
            raise CredentialResolutionError(ValueError("Credentials carry no access token"))
        return f"Bearer {token}"

    def _resource_url(self, credentials: Any, resource: str) -> str:
        base = self.config.base_url.rstrip("/")
        if isinstance(credentials, Mapping):
            upn = credentials.get("userPrincipalName")
            if credentials.get("useShared") and upn:
                return f"{base}/users/{upn}{resource}"
        return f"{base}/me{resource}"

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def api_request(
        self,
        method: str,
        resource: str,
        body: Any = None,
        qs: Mapping[str, Any] | None = None,
        uri: str | None = None,
        headers: Mapping[str, str] | None = None,
        full_response: bool = False,
        item_index: int = 0,
    ) -> Any:
        """
        Call the Graph API for one item.

        Returns the decoded JSON body, or the ``HttpResponse`` itself when
        ``full_response`` is set (used for binary downloads).
        """
        credentials, source = self.resolve_credentials(item_index)

        descriptor = RequestDescriptor(
            method=method,
            uri=uri or self._resource_url(credentials, resource),
            headers={"Content-Type": "application/json"},
            query=dict(qs or {}),
            body=body or None,
        )
        if headers:
            descriptor = descriptor.with_headers(headers)
        descriptor = descriptor.with_headers({"Authorization": self._authorization(credentials)})

        logger.debug("Graph %s %s (%s credentials)", method, descriptor.uri, source.value)
        try:
            response = self.http.request(descriptor)
        except HttpRequestError as e:
            prepared = prepare_api_error(e)
            if prepared is e:
                raise
            raise prepared from e

        if full_response:
            return response
        return response.json()

    def api_request_all_items(
        self,
        property_name: str,
        method: str,
        endpoint: str,
        body: Any = None,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        item_index: int = 0,
    ) -> list[Any]:
        """Follow ``@odata.nextLink`` and collect every ``property_name`` entry."""
        query = dict(query or {})
        query["$top"] = self.config.page_size

        return_data: list[Any] = []
        next_link: str | None = None
        while True:
            # nextLink already carries the query string
            response = self.api_request(
                method,
                endpoint,
                body,
                None if next_link else query,
                next_link,
                headers,
                item_index=item_index,
            )
            return_data.extend(response.get(property_name) or [])
            next_link = response.get("@odata.nextLink")
            if next_link is None:
                break
        return return_data

    # ------------------------------------------------------------------
    # Messages and folders
    # ------------------------------------------------------------------

    def download_attachments(
        self,
        messages: Sequence[Mapping[str, Any]] | Mapping[str, Any],
        prefix: str,
        item_index: int = 0,
    ) -> list[NodeItem]:
        """Return one item per message with its attachments as binary data."""
        if isinstance(messages, Mapping):
            messages = [messages]

        elements: list[NodeItem] = []
        for message in messages:
            binary: dict[str, BinaryData] = {}
            if message.get("hasAttachments") is True:
                attachments = self.api_request_all_items(
                    "value",
                    "GET",
                    f"/messages/{message['id']}/attachments",
                    item_index=item_index,
                )
                for index, attachment in enumerate(attachments):
                    response: HttpResponse = self.api_request(
                        "GET",
                        f"/messages/{message['id']}/attachments/{attachment['id']}/$value",
                        full_response=True,
                        item_index=item_index,
                    )
                    binary[f"{prefix}{index}"] = BinaryData.from_bytes(
                        response.body,
                        attachment.get("name"),
                        attachment.get("contentType"),
                    )
            elements.append(NodeItem(json=dict(message), binary=binary or None))
        return elements

    def get_mime_content(
        self,
        message_id: str,
        binary_property_name: str,
        output_file_name: str | None = None,
        item_index: int = 0,
    ) -> dict[str, BinaryData]:
        """Download a message as an ``.eml`` file."""
        response: HttpResponse = self.api_request(
            "GET",
            f"/messages/{message_id}/$value",
            full_response=True,
            item_index=item_index,
        )
        file_name = f"{output_file_name or message_id}.eml"
        return {
            binary_property_name: BinaryData.from_bytes(
                response.body,
                file_name,
                response.headers.get("content-type"),
            )
        }

    def get_subfolders(
        self,
        folders: Sequence[Mapping[str, Any]],
        add_path_to_display_name: bool = False,
        item_index: int = 0,
    ) -> list[Mapping[str, Any]]:
        """Return ``folders`` followed by all of their descendants."""
        return_data: list[Mapping[str, Any]] = list(folders)
        for folder in folders:
            if (folder.get("childFolderCount") or 0) > 0:
                response = self.api_request(
                    "GET",
                    f"/mailFolders/{folder['id']}/childFolders",
                    item_index=item_index,
                )
                subfolders = response.get("value") or []
                if add_path_to_display_name:
                    subfolders = [
                        {**sub, "displayName": f"{folder['displayName']}/{sub['displayName']}"}
                        for sub in subfolders
                    ]
                return_data.extend(
                    self.get_subfolders(subfolders, add_path_to_display_name, item_index)
                )
        return return_data
