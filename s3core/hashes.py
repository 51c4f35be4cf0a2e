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

"""Hash functions used for request signing and payload integrity."""

from __future__ import annotations

import base64
import hashlib
import hmac

# MD5 hash of zero length byte array.
ZERO_MD5_HASH = "1B2M2Y8AsgTpgAmY7PhCfg=="
# SHA-256 hash of zero length byte array.
ZERO_SHA256_HASH = (
    "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
)
UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"


def _to_bytes(data: str | bytes | None) -> bytes:
    if data is None:
        return b""
    return data.encode() if isinstance(data, str) else bytes(data)


def md5sum_hash(data: str | bytes | None) -> str:
    """Compute MD5 of data and return hash as Base64 encoded value."""
    # indicate md5 hashing algorithm is not used in a security context.
    # Refer https://bugs.python.org/issue9216 for more information.
    hasher = hashlib.new(  # type: ignore[call-arg]
        "md5",
        usedforsecurity=False,
    )
    hasher.update(_to_bytes(data))
    return base64.b64encode(hasher.digest()).decode("ascii")


def sha256_hash(data: str | bytes | None) -> str:
    """Compute SHA-256 of data and return hash as hex encoded value."""
    return hashlib.sha256(_to_bytes(data)).hexdigest()


def hmac_hash(
        key: bytes,
        data: str | bytes,
        hexdigest: bool = False,
) -> bytes | str:
    """Return HMAC-SHA256 digest of given key and data."""
    hasher = hmac.new(key, _to_bytes(data), hashlib.sha256)
    return hasher.hexdigest() if hexdigest else hasher.digest()
