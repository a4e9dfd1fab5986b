"""
Unit tests for MicrosoftGraphClient — credentials source, request building,
pagination, attachments, MIME content and sub-folders.
"""

import json
from unittest.mock import MagicMock

import pytest

from dynamic_credentials.config.settings import GraphConfig
from dynamic_credentials.exceptions import (
    CredentialResolutionError,
    GraphApiError,
    HttpRequestError,
)
from dynamic_credentials.models import CredentialSource, NodeItem, OAuth2Credential
from dynamic_credentials.outlook import MicrosoftGraphClient, prepare_api_error
from dynamic_credentials.transport import HttpClient, HttpResponse

GRAPH = "https://graph.microsoft.com/v1.0"
STORED = {"oauthTokenData": {"access_token": "stored-token"}}


class RecordingHttpClient(HttpClient):
    """HttpClient that returns queued responses and records descriptors."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def request(self, descriptor):
        self.requests.append(descriptor)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, HttpResponse):
            return response
        return HttpResponse(status_code=200, body=json.dumps(response).encode("utf-8"))


@pytest.fixture
def static_lookup():
    return MagicMock(return_value=STORED)


@pytest.fixture
def graph_factory(store_factory, static_lookup):
    def _make(responses, node_parameters=None, input_items=(), credentials=None):
        http = RecordingHttpClient(responses)
        client = MicrosoftGraphClient(
            store_factory(node_parameters or {}),
            http,
            credentials or static_lookup,
            input_items=input_items,
            config=GraphConfig(),
        )
        return client, http

    return _make


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_static_credentials_by_default(graph_factory, static_lookup):
    client, http = graph_factory([{"id": "me"}])
    assert client.api_request("GET", "/messages/1") == {"id": "me"}
    static_lookup.assert_called_once_with("microsoftOutlookOAuth2Api")
    sent = http.requests[0]
    assert sent.uri == f"{GRAPH}/me/messages/1"
    assert sent.headers["Authorization"] == "Bearer stored-token"
    assert sent.headers["Content-Type"] == "application/json"
    assert sent.body is None


@pytest.mark.unit
def test_dynamic_credentials_from_input(graph_factory, static_lookup):
    items = [{"json": {"credentials": {"access_token": "dyn-token"}}}]
    client, http = graph_factory(
        [{"value": []}], {"credentialsSource": "dynamic"}, input_items=items
    )
    creds, source = client.resolve_credentials(0)
    assert source is CredentialSource.DYNAMIC
    client.api_request("GET", "/mailFolders")
    assert http.requests[0].headers["Authorization"] == "Bearer dyn-token"
    static_lookup.assert_not_called()


@pytest.mark.unit
def test_dynamic_custom_parameter_name(graph_factory):
    items = [NodeItem(json={"graph": {"access_token": "row-token"}})]
    client, http = graph_factory(
        [{}],
        {"credentialsSource": "dynamic", "credentialsParameterName": "graph"},
        input_items=items,
    )
    client.api_request("GET", "/messages")
    assert http.requests[0].headers["Authorization"] == "Bearer row-token"


@pytest.mark.unit
def test_dynamic_missing_falls_back_to_static(graph_factory, static_lookup):
    client, http = graph_factory(
        [{}], {"credentialsSource": "dynamic"}, input_items=[{"json": {}}]
    )
    creds, source = client.resolve_credentials(0)
    assert source is CredentialSource.STATIC
    assert creds is STORED
    static_lookup.assert_called_once()


@pytest.mark.unit
def test_dynamic_without_input_items_falls_back(graph_factory, static_lookup):
    client, _ = graph_factory([], {"credentialsSource": "dynamic"})
    _, source = client.resolve_credentials(3)
    assert source is CredentialSource.STATIC


@pytest.mark.unit
def test_dynamic_non_object_json_falls_back(graph_factory, static_lookup):
    client, http = graph_factory(
        [{"id": "me"}],
        {"credentialsSource": "dynamic"},
        input_items=[{"json": ["not", "an", "object"]}],
    )
    creds, source = client.resolve_credentials(0)
    assert source is CredentialSource.STATIC
    assert creds is STORED
    static_lookup.assert_called_once()


@pytest.mark.unit
def test_dynamic_host_error_falls_back(raising_store_factory, static_lookup):
    store = raising_store_factory(
        {"credentialsParameterName": RuntimeError("expression failed")},
        {"credentialsSource": "dynamic"},
    )
    client = MicrosoftGraphClient(
        store, RecordingHttpClient([]), static_lookup, input_items=[{"json": {}}]
    )
    creds, source = client.resolve_credentials(0)
    assert source is CredentialSource.STATIC
    assert creds is STORED


@pytest.mark.unit
def test_shared_mailbox_url(graph_factory):
    shared = MagicMock(
        return_value={
            "access_token": "t",
            "useShared": True,
            "userPrincipalName": "team@example.com",
        }
    )
    client, http = graph_factory([{}], credentials=shared)
    client.api_request("GET", "/messages")
    assert http.requests[0].uri == f"{GRAPH}/users/team@example.com/messages"


@pytest.mark.unit
def test_oauth2_spec_credentials(graph_factory):
    provider = MagicMock(return_value=OAuth2Credential("spec-token"))
    client, http = graph_factory([{}], credentials=provider)
    client.api_request("GET", "/messages")
    assert http.requests[0].headers["Authorization"] == "Bearer spec-token"


@pytest.mark.unit
def test_missing_token_raises(graph_factory):
    client, _ = graph_factory([{}], credentials=MagicMock(return_value={}))
    with pytest.raises(CredentialResolutionError):
        client.api_request("GET", "/messages")


# ---------------------------------------------------------------------------
# Request building and errors
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_body_query_and_headers(graph_factory):
    client, http = graph_factory([{}])
    client.api_request(
        "POST",
        "/sendMail",
        body={"message": {"subject": "hi"}},
        qs={"$select": "id"},
        headers={"Prefer": 'outlook.body-content-type="text"'},
    )
    sent = http.requests[0]
    assert sent.method == "POST"
    assert sent.body == {"message": {"subject": "hi"}}
    assert sent.query == {"$select": "id"}
    assert sent.headers["Prefer"] == 'outlook.body-content-type="text"'
    assert sent.headers["Content-Type"] == "application/json"


@pytest.mark.unit
def test_explicit_uri_wins(graph_factory):
    client, http = graph_factory([{}])
    client.api_request("GET", "/ignored", uri=f"{GRAPH}/me/messages?$skip=10")
    assert http.requests[0].uri == f"{GRAPH}/me/messages?$skip=10"


@pytest.mark.unit
def test_bad_request_rewritten_to_graph_error(graph_factory):
    body = json.dumps({"error": {"code": "ErrorInvalidIdMalformed", "message": "Id is malformed."}})
    error = HttpRequestError("400 - Bad Request", status_code=400, description=body)
    client, _ = graph_factory([error])
    with pytest.raises(GraphApiError) as exc_info:
        client.api_request("GET", "/messages/bad")
    assert str(exc_info.value) == "Id is malformed."
    assert exc_info.value.code == "ErrorInvalidIdMalformed"
    assert exc_info.value.__cause__ is error


@pytest.mark.unit
def test_other_errors_propagate_unchanged(graph_factory):
    error = HttpRequestError("404 - Not Found", status_code=404, description="missing")
    client, _ = graph_factory([error])
    with pytest.raises(HttpRequestError) as exc_info:
        client.api_request("GET", "/messages/none")
    assert exc_info.value is error


@pytest.mark.unit
def test_prepare_api_error_plain_description():
    error = HttpRequestError("500 - Unknown Error", status_code=500, description="backend down")
    prepared = prepare_api_error(error)
    assert prepared is not error
    assert str(prepared) == "backend down"
    assert prepared.status_code == 500


@pytest.mark.unit
def test_prepare_api_error_without_description():
    error = HttpRequestError("400 - Bad Request", status_code=400)
    assert prepare_api_error(error) is error


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_all_items_follows_next_link(graph_factory):
    next_link = f"{GRAPH}/me/messages?$top=100&$skip=100"
    client, http = graph_factory(
        [
            {"value": [{"id": 1}, {"id": 2}], "@odata.nextLink": next_link},
            {"value": [{"id": 3}]},
        ]
    )
    query = {"$filter": "isRead eq false"}
    items = client.api_request_all_items("value", "GET", "/messages", query=query)

    assert [i["id"] for i in items] == [1, 2, 3]
    first, second = http.requests
    assert first.uri == f"{GRAPH}/me/messages"
    assert first.query == {"$filter": "isRead eq false", "$top": 100}
    assert second.uri == next_link
    assert second.query == {}
    assert query == {"$filter": "isRead eq false"}


@pytest.mark.unit
def test_all_items_page_size_from_config(store_factory, static_lookup):
    http = RecordingHttpClient([{"value": []}])
    client = MicrosoftGraphClient(
        store_factory(), http, static_lookup, config=GraphConfig(page_size=25)
    )
    assert client.api_request_all_items("value", "GET", "/messages") == []
    assert http.requests[0].query == {"$top": 25}


# ---------------------------------------------------------------------------
# Attachments, MIME, folders
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_download_attachments(graph_factory):
    client, http = graph_factory(
        [
            {"value": [{"id": "a1", "name": "report.pdf", "contentType": "application/pdf"}]},
            HttpResponse(status_code=200, body=b"%PDF-1.4"),
        ]
    )
    messages = [
        {"id": "m1", "hasAttachments": True},
        {"id": "m2", "hasAttachments": False},
    ]
    items = client.download_attachments(messages, "attachment_")

    assert len(items) == 2
    binary = items[0].binary["attachment_0"]
    assert binary.file_name == "report.pdf"
    assert binary.mime_type == "application/pdf"
    assert binary.content() == b"%PDF-1.4"
    assert items[0].json == {"id": "m1", "hasAttachments": True}
    assert items[1].binary is None
    assert http.requests[1].uri == f"{GRAPH}/me/messages/m1/attachments/a1/$value"


@pytest.mark.unit
def test_download_attachments_single_message(graph_factory):
    client, http = graph_factory([])
    items = client.download_attachments({"id": "m1"}, "file_")
    assert len(items) == 1
    assert http.requests == []


@pytest.mark.unit
def test_get_mime_content(graph_factory):
    response = HttpResponse(
        status_code=200,
        headers={"content-type": "message/rfc822"},
        body=b"Subject: hi\r\n\r\nbody",
    )
    client, http = graph_factory([response])
    binary = client.get_mime_content("m42", "data")
    assert binary["data"].file_name == "m42.eml"
    assert binary["data"].mime_type == "message/rfc822"
    assert binary["data"].content() == b"Subject: hi\r\n\r\nbody"
    assert http.requests[0].uri == f"{GRAPH}/me/messages/m42/$value"


@pytest.mark.unit
def test_get_mime_content_custom_name(graph_factory):
    client, _ = graph_factory([HttpResponse(status_code=200, body=b"x")])
    binary = client.get_mime_content("m42", "data", output_file_name="saved")
    assert binary["data"].file_name == "saved.eml"


@pytest.mark.unit
def test_get_subfolders_recursive(graph_factory):
    client, http = graph_factory(
        [
            {"value": [{"id": "f2", "displayName": "Child", "childFolderCount": 1}]},
            {"value": [{"id": "f3", "displayName": "Grandchild", "childFolderCount": 0}]},
        ]
    )
    folders = [
        {"id": "f1", "displayName": "Inbox", "childFolderCount": 1},
        {"id": "f9", "displayName": "Archive", "childFolderCount": 0},
    ]
    result = client.get_subfolders(folders, add_path_to_display_name=True)
    names = [f["displayName"] for f in result]
    assert names == ["Inbox", "Archive", "Inbox/Child", "Inbox/Child/Grandchild"]
    assert http.requests[0].uri == f"{GRAPH}/me/mailFolders/f1/childFolders"
    assert folders[0]["displayName"] == "Inbox"
