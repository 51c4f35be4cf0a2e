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
s3core.error
~~~~~~~~~~~~

Exception classes raised by signing and multipart upload operations.

:copyright: (c) 2015, 2016, 2017 by MinIO, Inc.
:license: Apache 2.0, see LICENSE for more details.

"""

from __future__ import absolute_import, annotations

from typing import Optional, Type, TypeVar
from xml.etree import ElementTree as ET

try:
    from urllib3.response import BaseHTTPResponse  # type: ignore[attr-defined]
except ImportError:
    from urllib3.response import HTTPResponse as BaseHTTPResponse

from .xml import findtext, fromstring


class S3CoreException(Exception):
    """Base s3core exception."""


class InvalidResponseError(S3CoreException):
    """Raised to indicate that non-xml response from server."""

    def __init__(
            self, code: int, content_type: Optional[str], body: Optional[str],
    ):
        self._code = code
        self._content_type = content_type
        self._body = body
        super().__init__(
            f"non-XML response from server; Response code: {code}, "
            f"Content-Type: {content_type}, Body: {body}"
        )

    @property
    def status_code(self) -> int:
        """Get HTTP status code."""
        return self._code

    def __reduce__(self):
        return type(self), (self._code, self._content_type, self._body)


class ServerError(S3CoreException):
    """Raised to indicate that S3 service returning HTTP server error."""

    def __init__(self, message: str, status_code: int):
        self._status_code = status_code
        super().__init__(message)

    @property
    def status_code(self) -> int:
        """Get HTTP status code."""
        return self._status_code

    def __reduce__(self):
        return type(self), (str(self), self._status_code)


class MissingETagError(S3CoreException):
    """
    Raised when a part upload succeeded at the HTTP level but the server
    returned no ETag for the part.
    """

    def __init__(self, part_number: int, upload_id: str):
        self.part_number = part_number
        self.upload_id = upload_id
        super().__init__(
            f"part {part_number} of upload {upload_id} succeeded with no ETag"
        )

    def __reduce__(self):
        return type(self), (self.part_number, self.upload_id)


class RewindError(S3CoreException):
    """Raised when a part payload cannot be rewound for another attempt."""


A = TypeVar("A", bound="S3Error")


class S3Error(S3CoreException):
    """
    Raised to indicate that error response is received
    when executing S3 operation.
    """

    def __init__(  # pylint: disable=too-many-arguments
            self,
            code: Optional[str],
            message: Optional[str],
            resource: Optional[str] = None,
            request_id: Optional[str] = None,
            host_id: Optional[str] = None,
            status_code: Optional[int] = None,
            bucket_name: Optional[str] = None,
            object_name: Optional[str] = None,
            response: Optional[BaseHTTPResponse] = None,
    ):
        self.code = code
        self.message = message
        self.resource = resource
        self.request_id = request_id
        self.host_id = host_id
        self.status_code = status_code
        self.bucket_name = bucket_name
        self.object_name = object_name
        self.response = response

        bucket_message = f", bucket_name: {bucket_name}" if bucket_name else ""
        object_message = f", object_name: {object_name}" if object_name else ""

        super().__init__(
            f"S3 operation failed; code: {code}, message: {message}, "
            f"resource: {resource}, request_id: {request_id}, "
            f"host_id: {host_id}, status: {status_code}"
            f"{bucket_message}{object_message}"
        )

    @classmethod
    def fromxml(
            cls: Type[A],
            response: BaseHTTPResponse,
            element: Optional[ET.Element] = None,
            bucket_name: Optional[str] = None,
            object_name: Optional[str] = None,
    ) -> A:
        """
        Create new object with values from error response XML; bucket and
        object names default to the given ones when the XML has none.
        """
        if element is None:
            element = fromstring(response.data)
        return cls(
            code=findtext(element, "Code"),
            message=findtext(element, "Message"),
            resource=findtext(element, "Resource"),
            request_id=findtext(element, "RequestId"),
            host_id=findtext(element, "HostId"),
            status_code=response.status,
            bucket_name=findtext(element, "BucketName") or bucket_name,
            object_name=findtext(element, "Key") or object_name,
            response=response,
        )

    def __reduce__(self):
        return type(self), (
            self.code, self.message, self.resource, self.request_id,
            self.host_id, self.status_code, self.bucket_name,
            self.object_name,
        )

    def __repr__(self):
        return (
            f"S3Error(code={self.code!r}, message={self.message!r}, "
            f"resource={self.resource!r}, request_id={self.request_id!r}, "
            f"status_code={self.status_code!r})"
        )
