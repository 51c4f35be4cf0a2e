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

# pylint: disable=too-many-instance-attributes

"""
Request and response types of multipart upload S3 APIs.
"""

from __future__ import absolute_import, annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, Optional, Type, TypeVar, cast
from xml.etree import ElementTree as ET

try:
    from urllib3.response import BaseHTTPResponse  # type: ignore[attr-defined]
except ImportError:
    from urllib3.response import HTTPResponse as BaseHTTPResponse

from .error import InvalidResponseError, S3Error
from .time import from_iso8601utc
from .xml import Element, SubElement, find, findall, findtext, fromstring

MAX_PART_NUMBER = 10000

R = TypeVar("R")


def _is_true(value: Optional[str]) -> bool:
    return (value or "").strip().lower() == "true"


def _to_int(value: Optional[str]) -> Optional[int]:
    return int(value) if value else None


C = TypeVar("C", bound="Part")


@dataclass(frozen=True)
class Part:
    """
    Uploaded part of a multipart upload.

    The ETag is kept exactly as the server returned it, quotes included.
    """
    part_number: int
    etag: str
    size: int = 0
    last_modified: Optional[datetime] = None

    @classmethod
    def fromxml(cls: Type[C], element: ET.Element) -> C:
        """Create new object with values from XML element."""
        return cls(
            part_number=int(cast(str, findtext(element, "PartNumber", True))),
            etag=cast(str, findtext(element, "ETag", True)),
            size=_to_int(findtext(element, "Size")) or 0,
            last_modified=from_iso8601utc(findtext(element, "LastModified")),
        )


def sorted_parts(parts: Iterable[Part]) -> list[Part]:
    """Return parts sorted by ascending part number."""
    return sorted(parts, key=lambda part: part.part_number)


U = TypeVar("U", bound="Upload")


@dataclass(frozen=True)
class Upload:
    """In-progress multipart upload listed by ListMultipartUploads."""
    object_name: str
    upload_id: str
    initiated_time: Optional[datetime] = None
    storage_class: Optional[str] = None

    @classmethod
    def fromxml(cls: Type[U], element: ET.Element) -> U:
        """Create new object with values from XML element."""
        return cls(
            object_name=cast(str, findtext(element, "Key", True)),
            upload_id=cast(str, findtext(element, "UploadId", True)),
            initiated_time=from_iso8601utc(findtext(element, "Initiated")),
            storage_class=findtext(element, "StorageClass"),
        )


@dataclass(frozen=True)
class ListMultipartUploadsResult:
    """ListMultipartUploads API result."""
    bucket_name: Optional[str] = None
    key_marker: Optional[str] = None
    upload_id_marker: Optional[str] = None
    next_key_marker: Optional[str] = None
    next_upload_id_marker: Optional[str] = None
    max_uploads: Optional[int] = None
    is_truncated: bool = False
    uploads: list[Upload] = field(default_factory=list)
    common_prefixes: list[str] = field(default_factory=list)

    @classmethod
    def fromxml(cls, element: ET.Element) -> ListMultipartUploadsResult:
        """Create new object with values from XML element."""
        return cls(
            bucket_name=findtext(element, "Bucket"),
            key_marker=findtext(element, "KeyMarker"),
            upload_id_marker=findtext(element, "UploadIdMarker"),
            next_key_marker=findtext(element, "NextKeyMarker"),
            next_upload_id_marker=findtext(element, "NextUploadIdMarker"),
            max_uploads=_to_int(findtext(element, "MaxUploads")),
            is_truncated=_is_true(findtext(element, "IsTruncated")),
            uploads=[
                Upload.fromxml(tag) for tag in findall(element, "Upload")
            ],
            common_prefixes=[
                findtext(tag, "Prefix") or ""
                for tag in findall(element, "CommonPrefixes")
            ],
        )


@dataclass(frozen=True)
class ListPartsResult:
    """ListParts API result."""
    bucket_name: Optional[str] = None
    object_name: Optional[str] = None
    upload_id: Optional[str] = None
    part_number_marker: Optional[str] = None
    next_part_number_marker: Optional[str] = None
    max_parts: Optional[int] = None
    is_truncated: bool = False
    parts: list[Part] = field(default_factory=list)

    @classmethod
    def fromxml(cls, element: ET.Element) -> ListPartsResult:
        """Create new object with values from XML element."""
        return cls(
            bucket_name=findtext(element, "Bucket"),
            object_name=findtext(element, "Key"),
            upload_id=findtext(element, "UploadId"),
            part_number_marker=findtext(element, "PartNumberMarker"),
            next_part_number_marker=findtext(
                element, "NextPartNumberMarker",
            ),
            max_parts=_to_int(findtext(element, "MaxParts")),
            is_truncated=_is_true(findtext(element, "IsTruncated")),
            parts=[Part.fromxml(tag) for tag in findall(element, "Part")],
        )


class CompleteMultipartUpload:
    """
    Manifest of CompleteMultipartUpload API.

    Parts are sorted by ascending part number when the manifest is
    created, whatever order they are given in.
    """

    def __init__(self, parts: Iterable[Part]):
        parts = sorted_parts(parts)
        for index, part in enumerate(parts):
            if not 1 <= part.part_number <= MAX_PART_NUMBER:
                raise ValueError(
                    f"part number {part.part_number} must be between 1 and "
                    f"{MAX_PART_NUMBER}"
                )
            if not part.etag:
                raise ValueError(f"part {part.part_number} has empty ETag")
            if index and parts[index - 1].part_number == part.part_number:
                raise ValueError(
                    f"part number {part.part_number} given more than once"
                )
        self._parts = [(part.part_number, part.etag) for part in parts]

    @property
    def parts(self) -> list[tuple[int, str]]:
        """Get (part number, ETag) pairs in ascending part number order."""
        return list(self._parts)

    def toxml(self) -> ET.Element:
        """Convert to XML."""
        element = Element("CompleteMultipartUpload")
        for part_number, etag in self._parts:
            tag = SubElement(element, "Part")
            SubElement(tag, "PartNumber", str(part_number))
            SubElement(tag, "ETag", etag)
        return element


@dataclass(frozen=True)
class CompleteMultipartUploadResult:
    """CompleteMultipartUpload API result."""
    location: Optional[str] = None
    bucket_name: Optional[str] = None
    object_name: Optional[str] = None
    etag: Optional[str] = None
    version_id: Optional[str] = None

    @classmethod
    def fromxml(
            cls,
            element: ET.Element,
            version_id: Optional[str] = None,
    ) -> CompleteMultipartUploadResult:
        """Create new object with values from XML element."""
        return cls(
            location=findtext(element, "Location"),
            bucket_name=findtext(element, "Bucket"),
            object_name=findtext(element, "Key"),
            etag=findtext(element, "ETag"),
            version_id=version_id,
        )


def invalid_response(response: BaseHTTPResponse) -> InvalidResponseError:
    """Create InvalidResponseError of an unusable response."""
    return InvalidResponseError(
        response.status,
        response.headers.get("content-type"),
        response.data.decode(errors="replace"),
    )


def parse_result(
        response: BaseHTTPResponse,
        root_tag: str,
        fromxml: Callable[[ET.Element], R],
        bucket_name: Optional[str] = None,
        object_name: Optional[str] = None,
) -> R:
    """
    Parse result document of a successful response with fromxml.

    An S3 error document in the body is raised as S3Error. A body which is
    not a well-formed document with root_tag as its root, or which lacks
    required values, is raised as InvalidResponseError.
    """
    try:
        element = fromstring(response.data)
    except ET.ParseError as exc:
        raise invalid_response(response) from exc
    if is_error_document(element):
        raise S3Error.fromxml(response, element, bucket_name, object_name)
    if element.tag != root_tag:
        raise invalid_response(response)
    try:
        return fromxml(element)
    except ValueError as exc:
        raise invalid_response(response) from exc


def _upload_id(element: ET.Element) -> str:
    upload_id = findtext(element, "UploadId", True)
    if not upload_id:
        raise ValueError("empty UploadId in InitiateMultipartUpload response")
    return upload_id


def parse_initiate(response: BaseHTTPResponse) -> str:
    """Get upload ID of InitiateMultipartUpload response."""
    return parse_result(response, "InitiateMultipartUploadResult", _upload_id)


def is_error_document(element: ET.Element) -> bool:
    """Check whether element is the root of an S3 error document."""
    return element.tag == "Error" and find(element, "Code") is not None
