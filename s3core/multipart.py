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
Multipart upload sessions of a bucket.

A multipart upload is initiated (or discovered by listing), receives parts
in any order, and ends by either completing or aborting it. Every S3 call
made here runs in an attempt sequence of the bucket's configuration.
"""

from __future__ import absolute_import, annotations

from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

from urllib3._collections import HTTPHeaderDict

from .commonconfig import PRIVATE, Config
from .datatypes import (MAX_PART_NUMBER, CompleteMultipartUpload,
                        CompleteMultipartUploadResult,
                        ListMultipartUploadsResult, ListPartsResult, Part,
                        invalid_response, parse_initiate, parse_result,
                        sorted_parts)
from .error import MissingETagError, RewindError, S3Error
from .hashes import md5sum_hash, sha256_hash
from .helpers import (HTTPQueryDict, PartStream, check_bucket_name,
                      check_non_empty_string, check_object_name,
                      read_part_data)
from .http import HttpClient
from .retry import Page, has_code, paginate, retry
from .xml import getbytes


class UploadState(Enum):
    """Life cycle of a multipart upload handle."""
    UNINITIATED = "uninitiated"
    ACTIVE = "active"
    COMPLETED = "completed"
    ABORTED = "aborted"


class Bucket:
    """
    Bucket handle to list, discover and initiate multipart uploads.

    Example::
        client = HttpClient("play.min.io", access_key, secret_key)
        bucket = Bucket(client, "my-bucket")
        multi = bucket.multi("my-object", "application/octet-stream")
    """

    def __init__(
            self,
            client: HttpClient,
            name: str,
            config: Optional[Config] = None,
    ):
        check_bucket_name(name)
        self._client = client
        self._name = name
        self._config = config or Config()

    @property
    def client(self) -> HttpClient:
        """Get HTTP client."""
        return self._client

    @property
    def name(self) -> str:
        """Get bucket name."""
        return self._name

    @property
    def config(self) -> Config:
        """Get configuration."""
        return self._config

    def _list_multipart_uploads(
            self,
            prefix: str,
            delimiter: str,
            markers: dict[str, str],
    ) -> Page[Multi]:
        """Execute ListMultipartUploads S3 API for one page."""
        query_params = HTTPQueryDict({
            "uploads": "",
            "max-uploads": str(self._config.list_uploads_max),
            "prefix": prefix,
            "delimiter": delimiter,
        })
        for key, value in markers.items():
            query_params[key] = value
        response = self._client.execute(
            "GET", self._name, query_params=query_params,
        )
        result = parse_result(
            response, "ListMultipartUploadsResult",
            ListMultipartUploadsResult.fromxml, self._name,
        )
        uploads = [
            Multi(self, upload.object_name, upload.upload_id,
                  upload.initiated_time)
            for upload in result.uploads
        ]
        key_marker = result.next_key_marker
        upload_id_marker = result.next_upload_id_marker
        if result.is_truncated and not key_marker:
            # Continue after whichever of last upload and last common prefix
            # sorts later.
            prefixes = result.common_prefixes
            if prefixes and (not uploads or prefixes[-1] > uploads[-1].key):
                key_marker, upload_id_marker = prefixes[-1], ""
            elif uploads:
                key_marker = uploads[-1].key
                upload_id_marker = uploads[-1].upload_id
            else:
                raise invalid_response(response)
        return Page(
            items=uploads,
            is_truncated=result.is_truncated,
            markers={
                "key-marker": key_marker or "",
                "upload-id-marker": upload_id_marker or "",
            },
            prefixes=result.common_prefixes,
        )

    def list_multi(
            self,
            prefix: str = "",
            delimiter: str = "",
    ) -> tuple[list[Multi], list[str]]:
        """
        List in-progress multipart uploads of this bucket.

        Only uploads whose object name starts with prefix are listed. When
        a delimiter is given, object names containing it after the prefix
        are rolled up into common prefixes instead.

        :param prefix: (Optional) Object name prefix.
        :param delimiter: (Optional) Delimiter of common prefixes.
        :return: Tuple of ACTIVE :class:`Multi` handles and common prefixes.
        """
        return paginate(
            self._config.attempts,
            lambda markers: self._list_multipart_uploads(
                prefix, delimiter, markers,
            ),
        )

    def multi(
            self,
            key: str,
            content_type: str = "application/octet-stream",
            acl: str = PRIVATE,
    ) -> Multi:
        """
        Get the in-progress multipart upload of key, initiating a new one
        if none exists.

        :param key: Object name in the bucket.
        :param content_type: Content type of a new upload.
        :param acl: Canned ACL of a new upload.
        :return: ACTIVE :class:`Multi` handle.
        """
        check_object_name(key)
        try:
            uploads, _ = self.list_multi(prefix=key)
        except S3Error as exc:
            if not has_code(exc, "NoSuchUpload"):
                raise
            uploads = []
        for multi in uploads:
            if multi.key == key:
                return multi
        return self.init_multi(key, content_type, acl)

    def _create_multipart_upload(
            self, key: str, content_type: str, acl: str,
    ) -> str:
        """Execute CreateMultipartUpload S3 API."""
        headers = HTTPHeaderDict()
        headers["Content-Type"] = content_type
        headers["x-amz-acl"] = acl
        response = self._client.execute(
            "POST",
            self._name,
            key,
            headers=headers,
            query_params=HTTPQueryDict({"uploads": ""}),
        )
        return parse_initiate(response)

    def init_multi(
            self,
            key: str,
            content_type: str = "application/octet-stream",
            acl: str = PRIVATE,
    ) -> Multi:
        """
        Initiate a new multipart upload of key.

        :param key: Object name in the bucket.
        :param content_type: Content type of the object.
        :param acl: Canned ACL of the object.
        :return: ACTIVE :class:`Multi` handle.
        """
        check_object_name(key)
        check_non_empty_string(content_type, "content type")
        multi = Multi(self, key, "", state=UploadState.UNINITIATED)
        upload_id = retry(
            self._config.attempts,
            self._create_multipart_upload, key, content_type, acl,
        )
        multi._activate(upload_id)  # pylint: disable=protected-access
        return multi


class Multi:
    """
    Handle of one multipart upload session.

    The handle holds no counters of its own, so parts may be uploaded
    concurrently from several threads. Completing and aborting the same
    session concurrently is left for the server to decide.
    """

    def __init__(
            self,
            bucket: Bucket,
            key: str,
            upload_id: str,
            initiated: Optional[datetime] = None,
            state: UploadState = UploadState.ACTIVE,
    ):
        self._bucket = bucket
        self._key = key
        self._upload_id = upload_id
        self._initiated = initiated
        self._state = state

    def __repr__(self):
        return (
            f"{type(self).__name__}(bucket={self._bucket.name!r}, "
            f"key={self._key!r}, upload_id={self._upload_id!r}, "
            f"state={self._state.value})"
        )

    @property
    def bucket(self) -> Bucket:
        """Get bucket handle."""
        return self._bucket

    @property
    def key(self) -> str:
        """Get object name."""
        return self._key

    @property
    def upload_id(self) -> str:
        """Get upload ID."""
        return self._upload_id

    @property
    def initiated(self) -> Optional[datetime]:
        """Get initiated time."""
        return self._initiated

    @property
    def state(self) -> UploadState:
        """Get state of this handle."""
        return self._state

    def _activate(self, upload_id: str):
        self._upload_id = upload_id
        self._state = UploadState.ACTIVE

    def _transition(self, state: UploadState):
        # Terminal states never change.
        if self._state == UploadState.ACTIVE:
            self._state = state

    def _execute(self, method: str, query_params: HTTPQueryDict, **kwargs):
        query_params["uploadId"] = self._upload_id
        return self._bucket.client.execute(
            method,
            self._bucket.name,
            self._key,
            query_params=query_params,
            **kwargs,
        )

    def _upload_part(
            self,
            part_number: int,
            stream: PartStream,
            size: int,
            md5_base64: str,
            sha256_hex: Optional[str],
    ) -> Part:
        """Execute UploadPart S3 API."""
        try:
            stream.seek(0)
        except (OSError, ValueError) as exc:
            raise RewindError(
                f"unable to rewind part {part_number} data: {exc}",
            ) from exc
        data = read_part_data(stream, size)
        if len(data) != size:
            raise ValueError(
                f"part {part_number} has {len(data)} bytes; "
                f"expected {size} bytes"
            )
        headers = HTTPHeaderDict()
        headers["Content-MD5"] = md5_base64
        response = self._execute(
            "PUT",
            HTTPQueryDict({"partNumber": str(part_number)}),
            body=data,
            headers=headers,
            content_sha256=sha256_hex,
            no_body_trace=True,
        )
        etag = response.headers.get("etag")
        if not etag:
            raise MissingETagError(part_number, self._upload_id)
        return Part(part_number, etag, size)

    def put_part_hash(
            self,
            part_number: int,
            stream: PartStream,
            size: int,
            md5_base64: str,
            sha256_hex: Optional[str] = None,
    ) -> Part:
        """
        Upload a part with precomputed hashes of its data.

        The stream is rewound to its beginning before every attempt, so it
        must be seekable.

        :param part_number: Part number between 1 and 10000.
        :param stream: Seekable binary stream of part data.
        :param size: Size of part data.
        :param md5_base64: Base64 encoded MD5 hash of part data.
        :param sha256_hex: (Optional) Hex encoded SHA-256 hash of part data.
        :return: :class:`Part <Part>` object.
        :raise MissingETagError: If server response carries no ETag.
        """
        if not 1 <= part_number <= MAX_PART_NUMBER:
            raise ValueError(
                f"part number must be between 1 and {MAX_PART_NUMBER}",
            )
        return retry(
            self._bucket.config.attempts,
            self._upload_part,
            part_number, stream, size, md5_base64, sha256_hex,
        )

    def put_part(self, part_number: int, stream: PartStream) -> Part:
        """
        Upload all data of a seekable stream as a part.

        Size and hashes are computed from the stream before uploading.

        Example::
            with open("part-1.bin", "rb") as stream:
                part = multi.put_part(1, stream)
        """
        try:
            stream.seek(0)
        except (OSError, ValueError) as exc:
            raise RewindError(
                f"unable to rewind part {part_number} data: {exc}",
            ) from exc
        data = stream.read()
        return self.put_part_hash(
            part_number,
            stream,
            len(data),
            md5sum_hash(data),
            sha256_hash(data),
        )

    def _list_parts(self, markers: dict[str, str]) -> Page[Part]:
        """Execute ListParts S3 API for one page."""
        query_params = HTTPQueryDict({
            "max-parts": str(self._bucket.config.list_parts_max),
        })
        for key, value in markers.items():
            query_params[key] = value
        response = self._execute("GET", query_params)
        result = parse_result(
            response, "ListPartsResult", ListPartsResult.fromxml,
            self._bucket.name, self._key,
        )
        marker = result.next_part_number_marker
        if result.is_truncated and not marker:
            if not result.parts:
                raise invalid_response(response)
            marker = str(result.parts[-1].part_number)
        return Page(
            items=result.parts,
            is_truncated=result.is_truncated,
            markers={"part-number-marker": marker or ""},
        )

    def list_parts(self) -> list[Part]:
        """
        List uploaded parts of this upload.

        :return: List of :class:`Part <Part>` in ascending part number
            order.
        """
        parts, _ = paginate(self._bucket.config.attempts, self._list_parts)
        return sorted_parts(parts)

    def _complete_multipart_upload(
            self, body: bytes,
    ) -> CompleteMultipartUploadResult:
        """Execute CompleteMultipartUpload S3 API."""
        headers = HTTPHeaderDict()
        headers["Content-Type"] = "application/xml"
        headers["Content-MD5"] = md5sum_hash(body)
        response = self._execute(
            "POST", HTTPQueryDict(), body=body, headers=headers,
        )
        # Server may fail after sending 200 OK while assembling the object.
        version_id = response.headers.get("x-amz-version-id")
        return parse_result(
            response,
            "CompleteMultipartUploadResult",
            lambda element: CompleteMultipartUploadResult.fromxml(
                element, version_id,
            ),
            self._bucket.name,
            self._key,
        )

    def complete(
            self, parts: Iterable[Part],
    ) -> CompleteMultipartUploadResult:
        """
        Complete this upload by assembling the given parts.

        Parts are sent in ascending part number order whatever order they
        are given in.

        :param parts: Uploaded parts to assemble.
        :return: :class:`CompleteMultipartUploadResult` object.

        Example::
            parts = [multi.put_part(1, stream1), multi.put_part(2, stream2)]
            result = multi.complete(parts)
        """
        body = getbytes(CompleteMultipartUpload(parts).toxml())
        result = retry(
            self._bucket.config.attempts,
            self._complete_multipart_upload, body,
        )
        self._transition(UploadState.COMPLETED)
        return result

    def _abort_multipart_upload(self):
        """Execute AbortMultipartUpload S3 API."""
        self._execute("DELETE", HTTPQueryDict())

    def abort(self):
        """
        Abort this upload and delete its uploaded parts.

        Parts still being uploaded while aborting may survive; abort again
        to remove them. Aborting an already aborted upload may either
        succeed or fail with NoSuchUpload.
        """
        retry(self._bucket.config.attempts, self._abort_multipart_upload)
        self._transition(UploadState.ABORTED)
