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

# pylint: disable=too-many-arguments

"""HTTP client to perform signed requests to S3 services."""

from __future__ import absolute_import, annotations

import os
import platform
from datetime import datetime, timedelta
from typing import Optional, TextIO, cast
from urllib.parse import SplitResult, urlsplit
from xml.etree import ElementTree as ET

import certifi
import urllib3
from urllib3._collections import HTTPHeaderDict

try:
    from urllib3.response import BaseHTTPResponse  # type: ignore[attr-defined]
except ImportError:
    from urllib3.response import HTTPResponse as BaseHTTPResponse

from urllib3.util import Timeout

from . import __title__, __version__, time
from .credentials import Provider, StaticProvider
from .datatypes import is_error_document
from .error import InvalidResponseError, S3Error, ServerError
from .hashes import sha256_hash
from .helpers import (HTTPQueryDict, check_bucket_name, headers_to_strings,
                      quote, url_replace)
from .signer import Request, V4Signer
from .xml import fromstring

_DEFAULT_USER_AGENT = (
    f"s3core ({platform.system()}; {platform.machine()}) "
    f"{__title__}/{__version__}"
)
_DEFAULT_REGION = "us-east-1"
_MAX_EXPIRY = timedelta(days=7)


def _parse_url(endpoint: str) -> SplitResult:
    """Parse endpoint URL allowing scheme, host and port only."""
    url = urlsplit(endpoint)

    if url.scheme.lower() not in ["http", "https"]:
        raise ValueError("scheme in endpoint must be http or https")

    if not url.hostname:
        raise ValueError("host in endpoint must not be empty")

    if url.path and url.path != "/":
        raise ValueError("path in endpoint is not allowed")

    if url.query:
        raise ValueError("query in endpoint is not allowed")

    if url.fragment:
        raise ValueError("fragment in endpoint is not allowed")

    if url.username or url.password:
        raise ValueError("credentials in endpoint are not allowed")

    try:
        port = url.port
    except ValueError as exc:
        raise ValueError("invalid port") from exc

    scheme = url.scheme.lower()
    netloc = url.netloc
    if (scheme, port) in [("http", 80), ("https", 443)]:
        netloc = cast(str, url.hostname)
    return SplitResult(scheme, netloc, "", "", "")


class HttpClient:
    """
    HTTP client to perform signed requests to S3 services.

    Each call of `execute()` sends exactly one HTTP request; retrying is
    left to the caller. Requests are signed with AWS Signature Version 4
    when credentials are available.
    """
    _base_url: SplitResult
    _region: str
    _user_agent: str
    _trace_stream: Optional[TextIO]
    _provider: Optional[Provider]
    _http: urllib3.PoolManager

    def __init__(
            self,
            endpoint: str,
            access_key: Optional[str] = None,
            secret_key: Optional[str] = None,
            session_token: Optional[str] = None,
            secure: bool = True,
            region: Optional[str] = None,
            http_client: Optional[urllib3.PoolManager] = None,
            credentials: Optional[Provider] = None,
            cert_check: bool = True,
    ):
        """
        Initializes a new HTTP client.

        Args:
            endpoint (str):
                Host and optional port of an S3 service.

            access_key (Optional[str], default=None):
                Access key (aka user ID) of your account in the S3 service.

            secret_key (Optional[str], default=None):
                Secret key (aka password) of your account in the S3 service.

            session_token (Optional[str], default=None):
                Session token of your account in the S3 service.

            secure (bool, default=True):
                Flag to indicate whether to use a secure (TLS) connection
                to the S3 service.

            region (Optional[str], default=None):
                Region used in signatures; 'us-east-1' if not given.

            http_client (Optional[urllib3.PoolManager], default=None):
                Customized HTTP client.

            credentials (Optional[Provider], default=None):
                Credentials provider of your account in the S3 service.

            cert_check (bool, default=True):
                Flag to enable/disable server certificate validation
                for HTTPS connections.

        Example:
            >>> from s3core import HttpClient
            >>> client = HttpClient(
            ...     "play.min.io",
            ...     access_key="Q3AM3UQ867SPQQA43P2F",
            ...     secret_key="zuf+tfteSlswRu7BJ86wekitnifILbZam1KYY3TG",
            ... )
        """
        # Validate http client has correct base class.
        if http_client and not isinstance(http_client, urllib3.PoolManager):
            raise TypeError(
                "HTTP client should be urllib3.PoolManager like object, "
                f"got {type(http_client).__name__}",
            )

        self._base_url = _parse_url(
            ("https://" if secure else "http://") + endpoint,
        )
        self._region = region or _DEFAULT_REGION
        self._user_agent = _DEFAULT_USER_AGENT
        self._trace_stream = None
        if access_key:
            if secret_key is None:
                raise ValueError("secret key must be provided with access key")
            credentials = StaticProvider(access_key, secret_key, session_token)
        self._provider = credentials

        # Retries are driven by attempt strategies of the callers, hence
        # urllib3 retries are disabled.
        timeout = timedelta(minutes=5).seconds
        self._http = http_client or urllib3.PoolManager(
            timeout=Timeout(connect=timeout, read=timeout),
            maxsize=10,
            cert_reqs='CERT_REQUIRED' if cert_check else 'CERT_NONE',
            ca_certs=os.environ.get('SSL_CERT_FILE') or certifi.where(),
            retries=False,
        )

    def __del__(self):
        if hasattr(self, "_http"):  # Only required for unit test run
            self._http.clear()

    @property
    def region(self) -> str:
        """Get region used in signatures."""
        return self._region

    def set_app_info(self, app_name: str, app_version: str):
        """
        Set your application name and version to user agent header.

        :param app_name: Application name.
        :param app_version: Application version.
        """
        if not (app_name and app_version):
            raise ValueError("Application name/version cannot be empty.")
        self._user_agent = f"{_DEFAULT_USER_AGENT} {app_name}/{app_version}"

    def trace_on(self, stream: TextIO):
        """
        Enable http trace.

        :param stream: Stream for writing HTTP call tracing.
        """
        if not stream:
            raise ValueError('Input stream for trace output is invalid.')
        # Save new output stream.
        self._trace_stream = stream

    def trace_off(self):
        """Disable HTTP trace."""
        self._trace_stream = None

    def _build_url(
            self,
            bucket_name: Optional[str] = None,
            object_name: Optional[str] = None,
    ) -> SplitResult:
        """Build path-style URL of bucket or object."""
        path = "/"
        if bucket_name:
            check_bucket_name(bucket_name)
            path += bucket_name + "/"
            if object_name:
                path += quote(object_name)
        return url_replace(self._base_url, path=path)

    def _trace(self, text: str):
        if self._trace_stream:
            self._trace_stream.write(text)

    def _trace_request(self, request: Request, no_body_trace: bool):
        if not self._trace_stream:
            return
        url = cast(SplitResult, request.url)
        query = request.geturl()[len(url.geturl()):]
        self._trace("---------START-HTTP---------\n")
        self._trace(f"{request.method} {url.path}{query} HTTP/1.1\n")
        self._trace(headers_to_strings(request.headers, titled_key=True))
        self._trace("\n")
        if not no_body_trace and request.body is not None:
            self._trace("\n")
            self._trace(request.body.decode(errors="replace"))
            self._trace("\n")
        self._trace("\n")

    def _trace_response(self, response: BaseHTTPResponse):
        if not self._trace_stream:
            return
        self._trace(f"HTTP/1.1 {response.status}\n")
        self._trace(headers_to_strings(response.headers))
        self._trace("\n")
        if response.data:
            self._trace("\n")
            self._trace(response.data.decode(errors="replace"))
            self._trace("\n")
        self._trace("----------END-HTTP----------\n")

    def _get_credentials(self):
        return self._provider.retrieve() if self._provider else None

    def execute(
            self,
            method: str,
            bucket_name: Optional[str] = None,
            object_name: Optional[str] = None,
            body: Optional[bytes] = None,
            headers: Optional[HTTPHeaderDict] = None,
            query_params: Optional[HTTPQueryDict] = None,
            content_sha256: Optional[str] = None,
            no_body_trace: bool = False,
    ) -> BaseHTTPResponse:
        """
        Sign and send one HTTP request.

        Passed headers and query parameters are copied, so the same values
        can be reused for every attempt of an operation.

        :param method: HTTP method.
        :param bucket_name: (Optional) Name of the bucket.
        :param object_name: (Optional) Object name in the bucket.
        :param body: (Optional) Request body.
        :param headers: (Optional) Request headers.
        :param query_params: (Optional) Query parameters.
        :param content_sha256: (Optional) Hex encoded SHA-256 of body;
            computed from body if not given.
        :param no_body_trace: Flag to not write request body to trace.
        :return: :class:`urllib3.response.BaseHTTPResponse` with status
            200, 204 or 206.
        :raise S3Error: If server returned an error document.
        :raise ServerError: If server failed without an error document.
        :raise InvalidResponseError: If server returned non-XML error.
        """
        request = Request(
            method,
            self._build_url(bucket_name, object_name),
            headers=HTTPHeaderDict(headers or {}),
            query_params=HTTPQueryDict(query_params or {}),
            body=body,
        )
        request.headers["User-Agent"] = self._user_agent
        if method in ["PUT", "POST"]:
            request.headers["Content-Length"] = str(len(body or b""))
            if not request.headers.get("Content-Type"):
                request.headers["Content-Type"] = "application/octet-stream"
        if body is not None and not content_sha256:
            content_sha256 = sha256_hash(body)

        creds = self._get_credentials()
        if creds:
            if creds.session_token:
                request.headers["X-Amz-Security-Token"] = creds.session_token
            V4Signer(creds, "s3", self._region).sign(request, content_sha256)

        self._trace_request(request, no_body_trace)
        response = self._http.urlopen(
            method,
            request.geturl(),
            body=body,
            headers=request.headers,
            preload_content=True,
            redirect=False,
        )
        self._trace_response(response)

        if response.status in [200, 204, 206]:
            return response

        raise self._get_error(
            request, response, bucket_name, object_name,
        )

    @staticmethod
    def _get_error(
            request: Request,
            response: BaseHTTPResponse,
            bucket_name: Optional[str],
            object_name: Optional[str],
    ) -> Exception:
        """Decode error of failed response."""
        content_type = response.headers.get("content-type")
        if response.data:
            try:
                element = fromstring(response.data)
            except ET.ParseError:
                element = None
            if element is None or not is_error_document(element):
                return InvalidResponseError(
                    response.status,
                    content_type,
                    response.data.decode(errors="replace"),
                )
            return S3Error.fromxml(
                response, element, bucket_name, object_name,
            )

        error_map = {
            400: ("BadRequest", "Bad request"),
            403: ("AccessDenied", "Access denied"),
            404: (
                ("NoSuchUpload", "Upload does not exist")
                if "uploadId" in request.query_params
                else ("NoSuchKey", "Object does not exist")
                if object_name
                else ("NoSuchBucket", "Bucket does not exist")
                if bucket_name
                else ("ResourceNotFound", "Request resource not found")
            ),
            405: (
                "MethodNotAllowed",
                "The specified method is not allowed against this resource",
            ),
            409: ("ResourceConflict", "Request resource conflicts"),
            501: (
                "MethodNotAllowed",
                "The specified method is not allowed against this resource",
            ),
        }
        code, message = error_map.get(response.status, (None, None))
        if not code:
            return ServerError(
                f"server failed with HTTP status code {response.status}",
                response.status,
            )
        return S3Error(
            code=code,
            message=message,
            resource=cast(SplitResult, request.url).path,
            request_id=response.headers.get("x-amz-request-id"),
            host_id=response.headers.get("x-amz-id-2"),
            status_code=response.status,
            bucket_name=bucket_name,
            object_name=object_name,
            response=response,
        )

    def presigned_url(
            self,
            method: str,
            bucket_name: str,
            object_name: str,
            expires: timedelta = _MAX_EXPIRY,
            query_params: Optional[HTTPQueryDict] = None,
            request_date: Optional[datetime] = None,
    ) -> str:
        """
        Get presigned URL of an object for HTTP method, expiry time and
        custom request parameters.

        :param method: HTTP method.
        :param bucket_name: Name of the bucket.
        :param object_name: Object name in the bucket.
        :param expires: Expiry in seconds; defaults to 7 days.
        :param query_params: (Optional) Extra query parameters to sign.
        :param request_date: (Optional) Base date of signature; defaults
            to current time.
        :return: URL string.

        Example::
            url = client.presigned_url(
                "GET", "my-bucket", "my-object", expires=timedelta(hours=2),
            )
        """
        if expires.total_seconds() < 1 or expires > _MAX_EXPIRY:
            raise ValueError("expires must be between 1 second to 7 days")

        creds = self._get_credentials()
        if not creds:
            raise ValueError("anonymous client cannot presign URLs")

        query_params = HTTPQueryDict(query_params or {})
        query_params["X-Amz-Expires"] = str(int(expires.total_seconds()))
        request = Request(
            method,
            self._build_url(bucket_name, object_name),
            query_params=query_params,
        )
        if request_date:
            request.headers["x-amz-date"] = time.to_amz_date(request_date)
        V4Signer(creds, "s3", self._region).sign(request)
        return request.geturl()
