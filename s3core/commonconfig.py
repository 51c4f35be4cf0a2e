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

"""Common configuration of multipart upload operations."""

from __future__ import absolute_import, annotations

from dataclasses import dataclass, field

from .retry import AttemptStrategy

# Canned ACLs accepted by x-amz-acl header.
PRIVATE = "private"
PUBLIC_READ = "public-read"
PUBLIC_READ_WRITE = "public-read-write"
AUTHENTICATED_READ = "authenticated-read"
BUCKET_OWNER_READ = "bucket-owner-read"
BUCKET_OWNER_FULL_CONTROL = "bucket-owner-full-control"

# Maximum page size accepted by ListMultipartUploads and ListParts.
MAX_PAGE_SIZE = 1000


@dataclass(frozen=True)
class Config:
    """
    Configuration of a bucket handle and the multipart uploads created
    through it.

    attempts: Attempt strategy wrapping every S3 call.
    list_uploads_max: Page size of ListMultipartUploads calls.
    list_parts_max: Page size of ListParts calls.
    """
    attempts: AttemptStrategy = field(default_factory=AttemptStrategy)
    list_uploads_max: int = MAX_PAGE_SIZE
    list_parts_max: int = MAX_PAGE_SIZE

    def __post_init__(self):
        for name in ("list_uploads_max", "list_parts_max"):
            value = getattr(self, name)
            if not 1 <= value <= MAX_PAGE_SIZE:
                raise ValueError(
                    f"{name} must be between 1 and {MAX_PAGE_SIZE}",
                )
