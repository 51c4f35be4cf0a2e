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

import sys

from s3core import AttemptStrategy, Bucket, Config, HttpClient

client = HttpClient(
    "play.min.io",
    access_key="Q3AM3UQ867SPQQA43P2F",
    secret_key="zuf+tfteSlswRu7BJ86wekitnifILbZam1KYY3TG",
)

# Trace HTTP calls to see every attempt.
client.trace_on(sys.stderr)

# Retry each call for up to 30 seconds, at least 3 times.
config = Config(attempts=AttemptStrategy(total=30, delay=1, min_attempts=3))
bucket = Bucket(client, "my-bucket", config)

# List incomplete uploads under 'my-prefix/' and abort them.
uploads, prefixes = bucket.list_multi(prefix="my-prefix/", delimiter="/")
for multi in uploads:
    print(multi.key, multi.upload_id, multi.initiated)
    multi.abort()
for prefix in prefixes:
    print("prefix", prefix)
