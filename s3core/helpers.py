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

"""Helper functions."""

from __future__ import absolute_import, annotations

import re
import urllib.parse
from typing import Iterable, Mapping

from typing_extensions import Protocol

_BUCKET_NAME_REGEX = re.compile(r'^[a-z0-9][a-z0-9_\.\-\:]{1,61}[a-z0-9]$',
                                re.IGNORECASE)
_IPV4_REGEX = re.compile(
    r'^((25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9][0-9]|[0-9])\.){3}'
    r'(25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9][0-9]|[0-9])$')
_CREDENTIAL_REGEX = re.compile(r"Credential=([^/]+)")
_SIGNATURE_REGEX = re.compile(r"Signature=([0-9a-f]+)")


def quote(
        resource: str | bytes,
        safe: str = "/",
        encoding: str | None = None,
        errors: str | None = None,
) -> str:
    """
    Percent-encode everything except RFC 3986 unreserved characters and
    characters in `safe`.
    """
    return urllib.parse.quote(
        resource,
        safe=safe,
        encoding=encoding,
        errors=errors,
    ).replace("%7E", "~")


def queryencode(
        query: str | bytes,
        safe: str = "",
        encoding: str | None = None,
        errors: str | None = None,
) -> str:
    """Encode query parameter name or value; space becomes '%20'."""
    return quote(query, safe, encoding, errors)


class HTTPQueryDict(dict):
    """
    Query parameters where every name maps to a list of values.

    Assigning a single string stores a one element list, so
    `params["uploads"] = ""` and `params["uploads"] = [""]` are the same.
    """

    def __init__(
            self,
            initial: Mapping[str, str | Iterable[str]] | None = None,
    ):
        super().__init__()
        for key, value in (initial or {}).items():
            self[key] = value

    def __setitem__(self, key: str, value: str | Iterable[str]):
        values = [value] if isinstance(value, str) else list(value)
        super().__setitem__(key, values)

    def add(self, key: str, value: str):
        """Append value to the values of key."""
        self.setdefault(key, []).append(value)

    def copy(self) -> HTTPQueryDict:
        return HTTPQueryDict(self)


def headers_to_strings(
        headers: Mapping[str, str | list[str] | tuple[str]],
        titled_key: bool = False,
) -> str:
    """Convert HTTP headers to multi-line string with secrets redacted."""
    values = []
    items = headers.iteritems() if hasattr(headers, "iteritems") else (
        headers.items()
    )
    for key, value in items:
        key = key.title() if titled_key else key
        for item in value if isinstance(value, (list, tuple)) else [value]:
            item = _CREDENTIAL_REGEX.sub(
                "Credential=*REDACTED*",
                _SIGNATURE_REGEX.sub("Signature=*REDACTED*", item),
            )
            values.append(f"{key}: {item}")
    return "\n".join(values)


class PartStream(Protocol):
    """typing stub for seekable binary stream of part data."""

    def read(self, size: int = -1, /) -> bytes:
        """Read up to size bytes."""

    def seek(self, offset: int, whence: int = 0, /) -> int:
        """Change stream position."""


def read_part_data(stream: PartStream, size: int) -> bytes:
    """Read part data of given size from stream."""
    part_data = b""
    while size:
        data = stream.read(size)
        if not data:
            break  # EOF reached
        if not isinstance(data, bytes):
            raise ValueError("read() must return 'bytes' object")
        part_data += data
        size -= len(data)
    return part_data


def check_bucket_name(bucket_name: str):
    """Check whether bucket name is valid."""
    if not isinstance(bucket_name, str):
        raise TypeError(
            f"bucket name must be str, not {type(bucket_name).__name__}",
        )

    if not _BUCKET_NAME_REGEX.match(bucket_name):
        raise ValueError(f'invalid bucket name {bucket_name}')

    if _IPV4_REGEX.match(bucket_name):
        raise ValueError(f'bucket name {bucket_name} must not be formatted '
                         'as an IP address')

    unallowed_successive_chars = ['..', '.-', '-.']
    if any(x in bucket_name for x in unallowed_successive_chars):
        raise ValueError(f'bucket name {bucket_name} contains invalid '
                         'successive characters')


def check_non_empty_string(string: str, name: str = "value"):
    """Check whether given string is not empty."""
    if not isinstance(string, str):
        raise TypeError(f"{name} must be str, not {type(string).__name__}")
    if not string.strip():
        raise ValueError(f"{name} must not be empty")


def check_object_name(object_name: str):
    """Check whether object name is valid; whitespace is a valid name."""
    if not isinstance(object_name, str):
        raise TypeError(
            f"object name must be str, not {type(object_name).__name__}",
        )
    if not object_name:
        raise ValueError("object name must not be empty")


def url_replace(
        url: urllib.parse.SplitResult,
        scheme: str | None = None,
        netloc: str | None = None,
        path: str | None = None,
        query: str | None = None,
        fragment: str | None = None,
) -> urllib.parse.SplitResult:
    """Return new URL with replaced properties in given URL."""
    return urllib.parse.SplitResult(
        scheme if scheme is not None else url.scheme,
        netloc if netloc is not None else url.netloc,
        path if path is not None else url.path,
        query if query is not None else url.query,
        fragment if fragment is not None else url.fragment,
    )
