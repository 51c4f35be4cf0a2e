# -*- coding: utf-8 -*-
# MinIO Python Library for Amazon S3 Compatible Cloud Storage, (C)
# [2014] - [2025] MinIO, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
s3core.canonical
~~~~~~~~~~~~~~~~

Canonical request construction for AWS Signature Version 4 (Task 1 of
the signing process).

    CanonicalRequest =
      HTTPRequestMethod + '\n' +
      CanonicalURI + '\n' +
      CanonicalQueryString + '\n' +
      CanonicalHeaders + '\n\n' +
      SignedHeaders + '\n' +
      HexEncode(Hash(RequestPayload))

All functions here are pure. They do not validate the request, they only
transform it; a malformed path or query is canonicalized as is.
"""

from __future__ import absolute_import, annotations

import urllib.parse
from typing import Iterable, Iterator, Mapping, Union

from .hashes import ZERO_SHA256_HASH
from .helpers import quote, queryencode

HeadersType = Mapping[str, Union[str, list[str], tuple[str, ...]]]
QueryType = Mapping[str, Union[str, Iterable[str]]]

# Headers changed by proxies and the transport after signing.
_UNSIGNED_HEADERS = ("authorization", "user-agent")


def _header_items(headers: HeadersType) -> Iterator[tuple[str, str]]:
    """Yield (name, value) for every header value including duplicates."""
    getlist = getattr(headers, "getlist", None)
    for key in headers:
        if getlist is not None:
            values = getlist(key)
        else:
            value = headers[key]
            values = value if isinstance(value, (list, tuple)) else [value]
        for value in values:
            yield key, value


def _query_items(query_params: QueryType) -> Iterator[tuple[str, str]]:
    for key, values in query_params.items():
        for value in [values] if isinstance(values, str) else values:
            yield key, value


def get_canonical_uri(path: str) -> str:
    """
    Get canonical URI of given URL path.

    The path is percent-decoded and re-encoded once, '.' and '..'
    segments are resolved, empty segments are dropped and a trailing slash
    is kept. An empty path is rendered as '/'.
    """
    path = urllib.parse.unquote(path or "")
    segments: list[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if segments:
                segments.pop()
            continue
        segments.append(segment)

    if not segments:
        return "/"

    uri = "/" + "/".join(quote(segment, safe="") for segment in segments)
    return uri + "/" if path.endswith("/") else uri


def get_canonical_query_string(query_params: QueryType) -> str:
    """
    Get canonical query string of given query parameters.

    Names and values are encoded with space as '%20'; pairs are ordered by
    encoded name and, for a repeated name, by encoded value.
    """
    groups: dict[str, list[str]] = {}
    for key, value in _query_items(query_params):
        name = queryencode(key)
        groups.setdefault(name, []).append(f"{name}={queryencode(value)}")
    return "&".join(
        "&".join(sorted(groups[name])) for name in sorted(groups)
    )


def get_canonical_headers(headers: HeadersType) -> tuple[str, str]:
    """Get canonical headers and signed headers."""
    values: dict[str, list[str]] = {}
    for key, value in _header_items(headers):
        key = key.lower()
        if key not in _UNSIGNED_HEADERS:
            values.setdefault(key, []).append(str(value).strip())

    names = sorted(values)
    canonical_headers = "\n".join(
        f"{name}:{','.join(sorted(values[name]))}" for name in names
    )
    return canonical_headers, ";".join(names)


def get_signed_headers(headers: HeadersType) -> str:
    """Get signed headers i.e. lowercased header names joined by ';'."""
    return get_canonical_headers(headers)[1]


def get_canonical_request(
        method: str,
        path: str,
        query_params: QueryType,
        headers: HeadersType,
        content_sha256: str | None = None,
) -> str:
    """Get canonical request string."""
    canonical_headers, signed_headers = get_canonical_headers(headers)
    return (
        f"{method}\n"
        f"{get_canonical_uri(path)}\n"
        f"{get_canonical_query_string(query_params)}\n"
        f"{canonical_headers}\n\n"
        f"{signed_headers}\n"
        f"{content_sha256 or ZERO_SHA256_HASH}"
    )
