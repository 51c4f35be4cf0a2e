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

"""Time formats used by AWS Signature Version 4 and S3 responses."""

from __future__ import absolute_import, annotations

from datetime import datetime, timezone

_AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
_SIGNER_DATE_FORMAT = "%Y%m%d"
_WEEK_DAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct",
           "Nov", "Dec"]


def _to_utc(value: datetime) -> datetime:
    """Convert to naive UTC time if value is timezone aware."""
    return (
        value.astimezone(timezone.utc).replace(tzinfo=None)
        if value.tzinfo else value
    )


def utcnow() -> datetime:
    """Return timezone aware current UTC time."""
    return datetime.now(timezone.utc)


def to_amz_date(value: datetime) -> str:
    """Format datetime into AMZ date (ISO-8601 basic) formatted string."""
    return _to_utc(value).strftime(_AMZ_DATE_FORMAT)


def from_amz_date(value: str) -> datetime:
    """Parse AMZ date (ISO-8601 basic) formatted string to datetime."""
    return datetime.strptime(value, _AMZ_DATE_FORMAT).replace(
        tzinfo=timezone.utc,
    )


def to_signer_date(value: datetime) -> str:
    """Format datetime into SignatureV4 date formatted string."""
    return _to_utc(value).strftime(_SIGNER_DATE_FORMAT)


def from_iso8601utc(value: str | None) -> datetime | None:
    """Parse UTC ISO-8601 formatted string to datetime."""
    if not value:
        return None

    try:
        time = datetime.strptime(value, "%Y-%m-%dT%H:%M:%S.%fZ")
    except ValueError:
        time = datetime.strptime(value, "%Y-%m-%dT%H:%M:%SZ")
    return time.replace(tzinfo=timezone.utc)


def from_http_header(value: str) -> datetime:
    """
    Parse HTTP header date (RFC 7231 IMF-fixdate) to datetime.

    Parsing does not depend on the current locale; weekday and month
    names are always English.
    """
    if len(value) != 29 or value[3] != "," or value[0:3] not in _WEEK_DAYS:
        raise ValueError(
            f"time data {value} does not match HTTP header format")
    weekday = _WEEK_DAYS.index(value[0:3])

    if value[8:11] not in _MONTHS:
        raise ValueError(
            f"time data {value} does not match HTTP header format")
    month = _MONTHS.index(value[8:11]) + 1

    day = datetime.strptime(value[4:8], " %d ").day
    time = datetime.strptime(value[11:], " %Y %H:%M:%S GMT")
    time = time.replace(day=day, month=month, tzinfo=timezone.utc)

    if weekday != time.weekday():
        raise ValueError(
            f"time data {value} does not match HTTP header format")

    return time


def to_http_header(value: datetime) -> str:
    """Format datetime into HTTP header date formatted string."""
    value = _to_utc(value)
    weekday = _WEEK_DAYS[value.weekday()]
    month = _MONTHS[value.month - 1]
    return (
        f"{weekday}, {value.day:02d} {month} "
        f"{value.strftime('%Y %H:%M:%S')} GMT"
    )
