"""Tests for the S3 ListObjectsV2 client."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from constants import Constants
from errors import DecodeAnomaly, NetworkError, PaginationLimitExceeded
from registry.s3 import ListingPage, ObjectRecord, decode_page, list_objects

NS = Constants.S3_XML_NAMESPACE


def _contents(key, size=1024):
    return (
        "<Contents>"
        f"<Key>{key}</Key>"
        "<LastModified>2023-04-12T18:03:11.000Z</LastModified>"
        "<ETag>&quot;9b2cf535f27731c974343645a3985328&quot;</ETag>"
        f"<Size>{size}</Size>"
        "<StorageClass>STANDARD</StorageClass>"
        "</Contents>"
    )


def _page(keys, truncated=False, next_token="", namespaced=True):
    xmlns = f' xmlns="{NS}"' if namespaced else ""
    token = f"<NextContinuationToken>{next_token}</NextContinuationToken>" if next_token else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f"<ListBucketResult{xmlns}>"
        "<Name>heroku-nodebin</Name>"
        "<Prefix>node</Prefix>"
        f"<KeyCount>{len(keys)}</KeyCount>"
        "<MaxKeys>1000</MaxKeys>"
        f"<IsTruncated>{'true' if truncated else 'false'}</IsTruncated>"
        f"{token}"
        + "".join(_contents(k) for k in keys)
        + "</ListBucketResult>"
    )


def _response(text):
    res = MagicMock()
    res.status_code = 200
    res.text = text
    res.content = text.encode("utf-8")
    return res


class TestDecodePage:
    """Test decoding of listing bodies."""

    def test_decodes_namespaced_body(self):
        """Real S3 bodies carry the 2006-03-01 namespace."""
        page = decode_page(_page(["node/release/linux-x64/node-v18.16.0-linux-x64.tar.gz"],
                                 truncated=True, next_token="tok"))

        assert page.name == "heroku-nodebin"
        assert page.prefix == "node"
        assert page.key_count == 1
        assert page.max_keys == 1000
        assert page.is_truncated is True
        assert page.next_continuation_token == "tok"
        assert page.items == (
            ObjectRecord(
                key="node/release/linux-x64/node-v18.16.0-linux-x64.tar.gz",
                last_modified=datetime(2023, 4, 12, 18, 3, 11, tzinfo=timezone.utc),
                checksum_tag='"9b2cf535f27731c974343645a3985328"',
                size_bytes=1024,
                storage_class="STANDARD",
            ),
        )

    def test_decodes_bare_body(self):
        page = decode_page(_page(["yarn/release/yarn-v1.22.19.tar.gz"], namespaced=False))
        assert [o.key for o in page.items] == ["yarn/release/yarn-v1.22.19.tar.gz"]
        assert page.is_truncated is False

    def test_missing_fields_default_to_zero_values(self):
        page = decode_page("<ListBucketResult></ListBucketResult>")
        assert page == ListingPage()

    def test_malformed_xml_is_anomaly(self):
        with pytest.raises(DecodeAnomaly):
            decode_page("<ListBucketResult><Name>oops")

    def test_wrong_root_is_anomaly(self):
        """An S3 <Error> document is not a listing."""
        with pytest.raises(DecodeAnomaly):
            decode_page("<Error><Code>AccessDenied</Code></Error>")

    def test_bad_size_is_anomaly(self):
        body = "<ListBucketResult><Contents><Key>k</Key><Size>big</Size></Contents></ListBucketResult>"
        with pytest.raises(DecodeAnomaly):
            decode_page(body)

    def test_bad_truncation_flag_is_anomaly(self):
        with pytest.raises(DecodeAnomaly):
            decode_page("<ListBucketResult><IsTruncated>maybe</IsTruncated></ListBucketResult>")


class TestListObjects:
    """Test pagination over the listing endpoint."""

    @patch("registry.s3.safe_get")
    def test_follows_continuation_tokens(self, mock_safe_get):
        """Three pages with tokens A then B yield three requests in order."""
        mock_safe_get.side_effect = [
            _response(_page(["node/a1", "node/a2"], truncated=True, next_token="A")),
            _response(_page(["node/b1"], truncated=True, next_token="B")),
            _response(_page(["node/c1", "node/c2"])),
        ]

        objects = list_objects("heroku-nodebin", "node")

        assert [o.key for o in objects] == ["node/a1", "node/a2", "node/b1", "node/c1", "node/c2"]
        assert mock_safe_get.call_count == 3
        urls = [c.args[0] for c in mock_safe_get.call_args_list]
        assert urls == ["https://heroku-nodebin.s3.amazonaws.com"] * 3
        params = [c.kwargs["params"] for c in mock_safe_get.call_args_list]
        assert params[0] == {"list-type": "2", "prefix": "node"}
        assert params[1] == {"list-type": "2", "prefix": "node", "continuation-token": "A"}
        assert params[2] == {"list-type": "2", "prefix": "node", "continuation-token": "B"}

    @patch("registry.s3.safe_get")
    def test_single_page(self, mock_safe_get):
        mock_safe_get.return_value = _response(_page(["yarn/release/yarn-v1.22.19.tar.gz"]))

        objects = list_objects("heroku-nodebin", "yarn")

        assert len(objects) == 1
        assert mock_safe_get.call_count == 1

    @patch("registry.s3.safe_get")
    def test_network_error_aborts_without_partial_results(self, mock_safe_get):
        mock_safe_get.side_effect = [
            _response(_page(["node/a1"], truncated=True, next_token="A")),
            NetworkError("s3 connection error: refused", url="https://heroku-nodebin.s3.amazonaws.com"),
        ]

        with pytest.raises(NetworkError):
            list_objects("heroku-nodebin", "node")

    @patch("registry.s3.safe_get")
    def test_page_bound_stops_endless_truncation(self, mock_safe_get):
        mock_safe_get.return_value = _response(_page(["node/x"], truncated=True, next_token="again"))

        with pytest.raises(PaginationLimitExceeded) as exc_info:
            list_objects("heroku-nodebin", "node", max_pages=5)

        assert exc_info.value.max_pages == 5
        assert mock_safe_get.call_count == 5

    @patch("registry.s3.safe_get")
    def test_strict_decode_aborts(self, mock_safe_get):
        mock_safe_get.side_effect = [
            _response(_page(["node/a1"], truncated=True, next_token="A")),
            _response("<html>gateway error</html>"),
        ]

        with pytest.raises(DecodeAnomaly):
            list_objects("heroku-nodebin", "node")

    @patch("registry.s3.safe_get")
    def test_lenient_decode_treats_page_as_final(self, mock_safe_get):
        mock_safe_get.side_effect = [
            _response(_page(["node/a1"], truncated=True, next_token="A")),
            _response("not xml at all"),
        ]

        objects = list_objects("heroku-nodebin", "node", strict=False)

        assert [o.key for o in objects] == ["node/a1"]
        assert mock_safe_get.call_count == 2

    @patch("registry.s3.safe_get")
    def test_truncated_page_without_token_is_anomaly(self, mock_safe_get):
        mock_safe_get.return_value = _response(_page(["node/a1"], truncated=True))

        with pytest.raises(DecodeAnomaly):
            list_objects("heroku-nodebin", "node")
