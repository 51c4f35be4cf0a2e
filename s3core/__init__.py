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
s3core - AWS Signature Version 4 signing and resilient multipart uploads
for Amazon S3 compatible cloud storage

    >>> from s3core import Bucket, HttpClient
    >>> client = HttpClient(
    ...     "play.min.io",
    ...     access_key="Q3AM3UQ867SPQQA43P2F",
    ...     secret_key="zuf+tfteSlswRu7BJ86wekitnifILbZam1KYY3TG",
    ... )
    >>> multi = Bucket(client, "my-bucket").multi("my-object")
    >>> with open("part-1.bin", "rb") as stream:
    ...     part = multi.put_part(1, stream)
    >>> result = multi.complete([part])

:copyright: (C) 2015-2025 MinIO, Inc.
:license: Apache 2.0, see LICENSE for more details.
"""

__title__ = "s3core"
__author__ = "MinIO, Inc."
__version__ = "0.1.0"
__license__ = "Apache 2.0"
__copyright__ = "Copyright 2015, 2016, 2017, 2018, 2019, 2020 MinIO, Inc."

# pylint: disable=unused-import,useless-import-alias
from .commonconfig import Config as Config
from .error import InvalidResponseError as InvalidResponseError
from .error import MissingETagError as MissingETagError
from .error import RewindError as RewindError
from .error import S3Error as S3Error
from .error import ServerError as ServerError
from .http import HttpClient as HttpClient
from .multipart import Bucket as Bucket
from .multipart import Multi as Multi
from .multipart import UploadState as UploadState
from .retry import AttemptStrategy as AttemptStrategy
from .signer import Request as Request
from .signer import V4Signer as V4Signer
