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

import io

from s3core import Bucket, HttpClient, S3Error

client = HttpClient(
    "play.min.io",
    access_key="Q3AM3UQ867SPQQA43P2F",
    secret_key="zuf+tfteSlswRu7BJ86wekitnifILbZam1KYY3TG",
)

# Resume the multipart upload of 'my-object' if one is in progress,
# else initiate a new one.
multi = Bucket(client, "my-bucket").multi("my-object", "text/plain")

# Every part but the last must be at least 5 MiB.
chunks = [b"a" * 5 * 1024 * 1024, b"b" * 1024]
uploaded = {part.part_number: part for part in multi.list_parts()}
try:
    for part_number, chunk in enumerate(chunks, start=1):
        if part_number not in uploaded:
            uploaded[part_number] = multi.put_part(
                part_number, io.BytesIO(chunk),
            )
    result = multi.complete(uploaded.values())
    print("created", result.object_name, "etag:", result.etag)
except S3Error as exc:
    print("upload failed;", exc)
    multi.abort()
