import asyncio
import io
import json

import httpx
import pytest

from czmlkit.loader import load_from_file, load_from_string, load_from_url

DOC = [
    {"id": "document", "name": "Test", "version": "1.0"},
    {"id": "pt", "position": {"cartographicDegrees": [10.0, 20.0, 0.0]}, "point": {}},
]


def _json_response(payload, content_type="application/json", status=200):
    return httpx.Response(
        status,
        content=json.dumps(payload).encode(),
        headers={"content-type": content_type} if content_type else {},
    )


def test_load_from_string_round_trips_document():
    result = load_from_string(json.dumps(DOC))
    assert result.success
    assert result.source == "string"
    assert result.data == DOC


def test_load_from_string_rejects_non_array():
    result = load_from_string('{"id": "document"}', source="inline")
    assert not result.success
    assert result.error == "CZML data must be an array"
    assert result.source == "inline"
    assert result.data is None


def test_load_from_string_passes_parse_error_through():
    result = load_from_string("[{not json")
    assert not result.success
    assert result.error
    assert "Expecting" in result.error


def test_load_from_url_success(mock_client):
    url = "https://example.test/scene.czml"

    async def _run():
        async with mock_client({url: _json_response(DOC)}) as client:
            return await load_from_url(url, client=client)

    result = asyncio.run(_run())
    assert result.success
    assert result.data == DOC
    assert result.source == url


@pytest.mark.parametrize(
    "content_type", [None, "application/json; charset=utf-8", "text/plain"]
)
def test_load_from_url_accepts_json_text_or_missing_content_type(
    mock_client, content_type
):
    url = "https://example.test/scene.czml"

    async def _run():
        response = _json_response(DOC, content_type=content_type)
        async with mock_client({url: response}) as client:
            return await load_from_url(url, client=client)

    assert asyncio.run(_run()).success


def test_load_from_url_rejects_unexpected_content_type(mock_client):
    url = "https://example.test/scene.png"

    async def _run():
        response = httpx.Response(
            200, content=b"\x89PNG", headers={"content-type": "image/png"}
        )
        async with mock_client({url: response}) as client:
            return await load_from_url(url, client=client)

    result = asyncio.run(_run())
    assert not result.success
    assert result.error == "Unexpected content type: image/png"


def test_load_from_url_reports_http_status(mock_client):
    url = "https://example.test/missing.czml"

    async def _run():
        async with mock_client({}) as client:
            return await load_from_url(url, client=client)

    result = asyncio.run(_run())
    assert not result.success
    assert result.error == "HTTP error: 404 Not Found"
    assert result.source == url


def test_load_from_url_reports_transport_failure(mock_client):
    url = "https://unreachable.test/scene.czml"

    async def _run():
        routes = {url: httpx.ConnectError("Connection refused")}
        async with mock_client(routes) as client:
            return await load_from_url(url, client=client)

    result = asyncio.run(_run())
    assert not result.success
    assert result.error == "Connection refused"


def test_load_from_url_reports_invalid_json_and_non_array(mock_client):
    bad = "https://example.test/bad.czml"
    obj = "https://example.test/object.czml"

    async def _run():
        routes = {
            bad: httpx.Response(
                200, content=b"[oops", headers={"content-type": "application/json"}
            ),
            obj: _json_response({"id": "document"}),
        }
        async with mock_client(routes) as client:
            return (
                await load_from_url(bad, client=client),
                await load_from_url(obj, client=client),
            )

    bad_result, obj_result = asyncio.run(_run())
    assert not bad_result.success and bad_result.error
    assert obj_result.error == "CZML data must be an array"


def test_load_from_file_path_uses_basename(tmp_path):
    target = tmp_path / "scene.czml"
    target.write_text(json.dumps(DOC), encoding="utf-8")

    result = asyncio.run(load_from_file(target))
    assert result.success
    assert result.source == "scene.czml"
    assert result.data == DOC


def test_load_from_file_object_text_and_bytes():
    class NamedText(io.StringIO):
        name = "uploads/upload.czml"

    text_file = NamedText(json.dumps(DOC))
    binary_file = io.BytesIO(b"\xef\xbb\xbf" + json.dumps(DOC).encode())

    text_result = asyncio.run(load_from_file(text_file))
    binary_result = asyncio.run(load_from_file(binary_file))

    assert text_result.source == "upload.czml"
    assert text_result.data == DOC
    assert binary_result.source == "file"
    assert binary_result.data == DOC


def test_load_from_file_read_failures(tmp_path):
    missing = asyncio.run(load_from_file(tmp_path / "absent.czml"))
    assert not missing.success
    assert missing.error.startswith("Error reading file")
    assert missing.source == "absent.czml"

    garbage = asyncio.run(load_from_file(io.BytesIO(b"\xff\xfe\xfa")))
    assert garbage.error == "Failed to read file as text"

    class WeirdReader:
        name = "weird.czml"

        def read(self):
            return 42

    weird = asyncio.run(load_from_file(WeirdReader()))
    assert weird.error == "Failed to read file as text"
    assert weird.source == "weird.czml"


def test_load_from_file_text_handle_faults(tmp_path):
    target = tmp_path / "latin.czml"
    target.write_bytes(b"\xff\xfe\xfa[]")

    with open(target, "r", encoding="utf-8") as handle:
        undecodable = asyncio.run(load_from_file(handle))
    assert not undecodable.success
    assert undecodable.error == "Failed to read file as text"
    assert undecodable.source == "latin.czml"

    closed = io.StringIO("[]")
    closed.close()
    closed_result = asyncio.run(load_from_file(closed))
    assert not closed_result.success
    assert closed_result.error.startswith("Error reading file")
    assert "closed file" in closed_result.error


def test_load_from_string_deep_nesting_is_a_failure_value():
    result = load_from_string("[" * 100000 + "]" * 100000)
    assert not result.success
    assert result.error
    assert result.data is None


@pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
def test_load_from_string_rejects_non_json_constants(constant):
    result = load_from_string(f'[{{"id": "a", "position": [{constant}, 0, 0]}}]')
    assert not result.success
    assert result.error == f"Invalid JSON constant: {constant}"
