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
s3core.signer
~~~~~~~~~~~~~

This module implements AWS Signature Version 4 signing of requests, both
with an `Authorization` header and with query parameters (pre-signed
URLs).

:copyright: (c) 2015 by MinIO, Inc.
:license: Apache 2.0, see LICENSE for more details.

"""

from __future__ import absolute_import, annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Union, cast
from urllib.parse import SplitResult, parse_qsl, urlsplit, urlunsplit

from urllib3._collections import HTTPHeaderDict

from . import time
from .canonical import (get_canonical_query_string, get_canonical_request,
                        get_signed_headers)
from .credentials import Credentials
from .hashes import UNSIGNED_PAYLOAD, ZERO_SHA256_HASH, hmac_hash, sha256_hash
from .helpers import HTTPQueryDict, url_replace

SIGN_V4_ALGORITHM = "AWS4-HMAC-SHA256"


@dataclass
class Request:
    """
    HTTP request to be signed.

    `url` carries scheme, host and path; query parameters live in
    `query_params` only. A query string passed within `url` is moved
    into `query_params`. Signing mutates `headers` and `query_params` in
    place.
    """
    method: str
    url: Union[SplitResult, str]
    headers: HTTPHeaderDict = field(default_factory=HTTPHeaderDict)
    query_params: HTTPQueryDict = field(default_factory=HTTPQueryDict)
    body: Optional[bytes] = None

    def __post_init__(self):
        url = urlsplit(self.url) if isinstance(self.url, str) else self.url
        if not isinstance(self.headers, HTTPHeaderDict):
            self.headers = HTTPHeaderDict(self.headers or {})
        if not isinstance(self.query_params, HTTPQueryDict):
            self.query_params = HTTPQueryDict(self.query_params or {})
        for key, value in parse_qsl(url.query, keep_blank_values=True):
            self.query_params.add(key, value)
        self.url = url_replace(url, query="", fragment="")

    def geturl(self) -> str:
        """Return URL string including encoded query parameters."""
        return urlunsplit(url_replace(
            cast(SplitResult, self.url),
            query=get_canonical_query_string(self.query_params),
        ))


def _get_scope(date: datetime, region: str, service_name: str) -> str:
    """Get credential scope string."""
    return f"{time.to_signer_date(date)}/{region}/{service_name}/aws4_request"


def _get_string_to_sign(
        date: datetime,
        scope: str,
        canonical_request_hash: str,
) -> str:
    """Get string-to-sign."""
    return (
        f"{SIGN_V4_ALGORITHM}\n{time.to_amz_date(date)}\n{scope}\n"
        f"{canonical_request_hash}"
    )


def _get_signing_key(
        secret_key: str,
        date: datetime,
        region: str,
        service_name: str,
) -> bytes:
    """
    Derive signing key.

        kDate = HMAC("AWS4" + kSecret, Date)
        kRegion = HMAC(kDate, Region)
        kService = HMAC(kRegion, Service)
        kSigning = HMAC(kService, "aws4_request")
    """
    key = ("AWS4" + secret_key).encode()
    for data in (time.to_signer_date(date), region, service_name,
                 "aws4_request"):
        key = cast(bytes, hmac_hash(key, data))
    return key


def _get_signature(signing_key: bytes, string_to_sign: str) -> str:
    """Get signature."""
    return cast(str, hmac_hash(signing_key, string_to_sign, hexdigest=True))


def _get_authorization(
        access_key: str,
        scope: str,
        signed_headers: str,
        signature: str,
) -> str:
    """Get authorization."""
    return (
        f"{SIGN_V4_ALGORITHM} Credential={access_key}/{scope}, "
        f"SignedHeaders={signed_headers}, Signature={signature}"
    )


def _parse_time(
        parser: Callable[[str], datetime],
        value: Optional[str],
) -> Optional[datetime]:
    """Parse value with parser; None for missing or malformed value."""
    if not value:
        return None
    try:
        return parser(value)
    except ValueError:
        return None


class V4Signer:
    """
    Signer of requests with the AWS Signature Version 4 Signing Process.

    A signer is bound to credentials, service name and region and holds no
    state between calls, so one signer can sign any number of requests.
    Every change to a request after signing invalidates its signature.
    """

    def __init__(
            self,
            credentials: Credentials,
            service_name: str = "s3",
            region: str = "us-east-1",
    ):
        self._credentials = credentials
        self._service_name = service_name
        self._region = region

    @property
    def region(self) -> str:
        """Get region."""
        return self._region

    @property
    def service_name(self) -> str:
        """Get service name."""
        return self._service_name

    def sign(
            self,
            request: Request,
            content_sha256: Optional[str] = None,
    ) -> Request:
        """
        Sign request in place.

        A request having `X-Amz-Expires` query parameter is pre-signed
        i.e. the signature is added as query parameters and payload is
        left unsigned. Otherwise `Authorization` header is set.

        :param request: Request to sign.
        :param content_sha256: (Optional) Hex encoded SHA-256 of payload;
            defaults to hash of empty payload.
        :return: The same request.
        """
        content_sha256 = content_sha256 or ZERO_SHA256_HASH
        url = cast(SplitResult, request.url)
        if "host" not in request.headers:
            request.headers["Host"] = url.netloc
        date = self.request_time(request)
        scope = _get_scope(date, self._region, self._service_name)
        access_key = self._credentials.access_key

        presign = "X-Amz-Expires" in request.query_params
        if presign:
            content_sha256 = UNSIGNED_PAYLOAD
            request.headers.discard("x-amz-date")
            query_params = request.query_params
            query_params["X-Amz-Algorithm"] = SIGN_V4_ALGORITHM
            query_params["X-Amz-Credential"] = f"{access_key}/{scope}"
            query_params["X-Amz-Date"] = time.to_amz_date(date)
            query_params["X-Amz-SignedHeaders"] = get_signed_headers(
                request.headers,
            )
            if self._credentials.session_token:
                query_params["X-Amz-Security-Token"] = (
                    self._credentials.session_token
                )
        elif self._service_name == "s3":
            request.headers["x-amz-content-sha256"] = content_sha256

        canonical_request = get_canonical_request(
            request.method,
            url.path,
            request.query_params,
            request.headers,
            content_sha256,
        )
        string_to_sign = _get_string_to_sign(
            date, scope, sha256_hash(canonical_request),
        )
        signing_key = _get_signing_key(
            self._credentials.secret_key,
            date,
            self._region,
            self._service_name,
        )
        signature = _get_signature(signing_key, string_to_sign)

        if presign:
            request.query_params["X-Amz-Signature"] = signature
        else:
            request.headers["Authorization"] = _get_authorization(
                access_key,
                scope,
                get_signed_headers(request.headers),
                signature,
            )
        return request

    @staticmethod
    def request_time(request: Request) -> datetime:
        """
        Resolve time of request.

        A valid `x-amz-date` header takes priority over `date` header. An
        `x-amz-date` in HTTP date format is rewritten to AMZ date format.
        If neither header is valid, current time is set as `x-amz-date`.
        """
        value = request.headers.get("x-amz-date")
        date = _parse_time(time.from_amz_date, value)
        if date:
            return date

        date = _parse_time(time.from_http_header, value)
        if date:
            request.headers["x-amz-date"] = time.to_amz_date(date)
            return date

        date = _parse_time(time.from_http_header, request.headers.get("date"))
        if date:
            return date

        date = time.utcnow()
        request.headers["x-amz-date"] = time.to_amz_date(date)
        return date
