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
from unittest import TestCase, mock

from urllib3.exceptions import ProtocolError

from s3core import (AttemptStrategy, Bucket, Config, HttpClient,
                    InvalidResponseError, MissingETagError, RewindError,
                    S3Error, UploadState)
from s3core.datatypes import Part
from s3core.hashes import sha256_hash
from s3core.http import _DEFAULT_USER_AGENT
from s3core.multipart import Multi

from .s3core_mocks import MockConnection, MockResponse

UPLOAD_ID = (
    "JNbR_cMdwnGiD12jKAd6WK2PUkfj2VxA7i4nCwjE6t71nI9Tl3eVDPFlU0nOixhftH7I1"
    "7ZPGkV3QA.l7ZD.QQ--"
)
OBJECT_URL = "https://localhost:9000/sample/multi"
UPLOAD_URL = OBJECT_URL + "?uploadId=" + UPLOAD_ID

INITIATE_RESULT = f'''<?xml version="1.0" encoding="UTF-8"?>
<InitiateMultipartUploadResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/">
  <Bucket>sample</Bucket>
  <Key>multi</Key>
  <UploadId>{UPLOAD_ID}</UploadId>
</InitiateMultipartUploadResult>'''

NO_UPLOADS = '''<?xml version="1.0" encoding="UTF-8"?>
<ListMultipartUploadsResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/">
  <Bucket>sample</Bucket>
  <KeyMarker/>
  <UploadIdMarker/>
  <NextKeyMarker/>
  <NextUploadIdMarker/>
  <Prefix>multi</Prefix>
  <MaxUploads>1000</MaxUploads>
  <IsTruncated>false</IsTruncated>
</ListMultipartUploadsResult>'''

COMPLETE_RESULT = '''<?xml version="1.0" encoding="UTF-8"?>
<CompleteMultipartUploadResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/">
  <Location>https://localhost:9000/sample/multi</Location>
  <Bucket>sample</Bucket>
  <Key>multi</Key>
  <ETag>"3858f62230ac3c915f300c664312c11f-3"</ETag>
</CompleteMultipartUploadResult>'''


def _error(code, message="message"):
    return f'''<?xml version="1.0" encoding="UTF-8"?>
<Error>
  <Code>{code}</Code>
  <Message>{message}</Message>
  <RequestId>3L137</RequestId>
  <HostId>3L137</HostId>
</Error>'''


def _bucket(min_attempts=1, **kwargs):
    client = HttpClient("localhost:9000", "minio", "minio123")
    config = Config(
        attempts=AttemptStrategy(total=0, delay=0, min_attempts=min_attempts),
        **kwargs,
    )
    return Bucket(client, "sample", config)


def _multi(min_attempts=1, **kwargs):
    return Multi(_bucket(min_attempts, **kwargs), "multi", UPLOAD_ID)


def _list_uploads_url(query):
    return "https://localhost:9000/sample/?" + query


class InitMultiTest(TestCase):
    @mock.patch('urllib3.PoolManager')
    def test_init_multi(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'POST', OBJECT_URL + '?uploads=',
                {'User-Agent': _DEFAULT_USER_AGENT,
                 'Content-Type': 'text/plain',
                 'x-amz-acl': 'public-read'},
                200, content=INITIATE_RESULT,
            ),
        )
        multi = _bucket().init_multi("multi", "text/plain", "public-read")
        self.assertEqual(multi.key, "multi")
        self.assertEqual(multi.upload_id, UPLOAD_ID)
        self.assertEqual(multi.bucket.name, "sample")
        self.assertEqual(multi.state, UploadState.ACTIVE)

    def test_empty_key(self):
        self.assertRaises(ValueError, _bucket().init_multi, "")

    @mock.patch('urllib3.PoolManager')
    def test_init_multi_whitespace_key(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'POST', 'https://localhost:9000/sample/%20?uploads=', {},
                200, content=INITIATE_RESULT,
            ),
        )
        multi = _bucket().init_multi(" ")
        self.assertEqual(multi.key, " ")
        self.assertEqual(multi.upload_id, UPLOAD_ID)

    @mock.patch('urllib3.PoolManager')
    def test_init_multi_without_upload_id(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'POST', OBJECT_URL + '?uploads=', {}, 200,
                content='<InitiateMultipartUploadResult/>',
            ),
        )
        with self.assertRaises(InvalidResponseError) as ctx:
            _bucket(min_attempts=3).init_multi("multi")
        self.assertEqual(ctx.exception.status_code, 200)
        self.assertEqual(len(mock_server.calls), 1)

    def test_invalid_bucket_name(self):
        client = HttpClient("localhost:9000", "minio", "minio123")
        self.assertRaises(ValueError, Bucket, client, "AB*CD")


class MultiTest(TestCase):
    @mock.patch('urllib3.PoolManager')
    def test_multi_without_previous_upload(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'GET',
                _list_uploads_url(
                    'delimiter=&max-uploads=1000&prefix=multi&uploads=',
                ),
                {'User-Agent': _DEFAULT_USER_AGENT}, 200, content=NO_UPLOADS,
            ),
        )
        mock_server.mock_add_request(
            MockResponse(
                'POST', OBJECT_URL + '?uploads=',
                {'Content-Type': 'application/octet-stream',
                 'x-amz-acl': 'private'},
                200, content=INITIATE_RESULT,
            ),
        )
        multi = _bucket().multi("multi", "application/octet-stream")
        self.assertEqual(multi.upload_id, UPLOAD_ID)
        self.assertEqual(multi.state, UploadState.ACTIVE)
        self.assertEqual(len(mock_server.calls), 2)

    @mock.patch('urllib3.PoolManager')
    def test_multi_after_no_such_upload(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'GET',
                _list_uploads_url(
                    'delimiter=&max-uploads=1000&prefix=multi&uploads=',
                ),
                {}, 404, content=_error("NoSuchUpload"),
            ),
        )
        mock_server.mock_add_request(
            MockResponse(
                'POST', OBJECT_URL + '?uploads=', {}, 200,
                content=INITIATE_RESULT,
            ),
        )
        multi = _bucket().multi("multi")
        self.assertEqual(multi.upload_id, UPLOAD_ID)
        self.assertEqual(len(mock_server.calls), 2)

    @mock.patch('urllib3.PoolManager')
    def test_multi_adopts_existing_upload(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'GET',
                _list_uploads_url(
                    'delimiter=&max-uploads=1000&prefix=multi&uploads=',
                ),
                {}, 200,
                content='''<?xml version="1.0" encoding="UTF-8"?>
<ListMultipartUploadsResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/">
  <Bucket>sample</Bucket>
  <IsTruncated>false</IsTruncated>
  <Upload>
    <Key>multi1</Key>
    <UploadId>iUVug89pPvSswrikD</UploadId>
    <Initiated>2010-11-26T19:24:17.000Z</Initiated>
  </Upload>
  <Upload>
    <Key>multi</Key>
    <UploadId>JNbR_cMdwnGiD12jKAd</UploadId>
    <Initiated>2010-11-26T19:24:17.000Z</Initiated>
  </Upload>
</ListMultipartUploadsResult>''',
            ),
        )
        multi = _bucket().multi("multi")
        self.assertEqual(multi.key, "multi")
        self.assertEqual(multi.upload_id, "JNbR_cMdwnGiD12jKAd")
        self.assertEqual(multi.initiated.year, 2010)
        self.assertEqual(multi.state, UploadState.ACTIVE)
        self.assertEqual(len(mock_server.calls), 1)

    @mock.patch('urllib3.PoolManager')
    def test_multi_listing_error(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'GET',
                _list_uploads_url(
                    'delimiter=&max-uploads=1000&prefix=multi&uploads=',
                ),
                {}, 403, content=_error("AccessDenied"),
            ),
        )
        with self.assertRaises(S3Error) as ctx:
            _bucket(min_attempts=3).multi("multi")
        self.assertEqual(ctx.exception.code, "AccessDenied")
        self.assertEqual(len(mock_server.calls), 1)


class ListMultiTest(TestCase):
    @mock.patch('urllib3.PoolManager')
    def test_list_multi_pages_and_prefixes(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'GET',
                _list_uploads_url(
                    'delimiter=%2F&max-uploads=1000&prefix=&uploads=',
                ),
                {}, 200,
                content='''<?xml version="1.0" encoding="UTF-8"?>
<ListMultipartUploadsResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/">
  <Bucket>sample</Bucket>
  <NextKeyMarker>a</NextKeyMarker>
  <NextUploadIdMarker>id1</NextUploadIdMarker>
  <IsTruncated>true</IsTruncated>
  <Upload><Key>a</Key><UploadId>id1</UploadId></Upload>
  <CommonPrefixes><Prefix>dir1/</Prefix></CommonPrefixes>
</ListMultipartUploadsResult>''',
            ),
        )
        mock_server.mock_add_request(
            MockResponse(
                'GET',
                _list_uploads_url(
                    'delimiter=%2F&key-marker=a&max-uploads=1000&prefix='
                    '&upload-id-marker=id1&uploads=',
                ),
                {}, 200,
                content='''<?xml version="1.0" encoding="UTF-8"?>
<ListMultipartUploadsResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/">
  <Bucket>sample</Bucket>
  <IsTruncated>false</IsTruncated>
  <Upload><Key>b</Key><UploadId>id2</UploadId></Upload>
  <CommonPrefixes><Prefix>dir2/</Prefix></CommonPrefixes>
</ListMultipartUploadsResult>''',
            ),
        )
        uploads, prefixes = _bucket().list_multi(delimiter="/")
        self.assertEqual(
            [(multi.key, multi.upload_id) for multi in uploads],
            [("a", "id1"), ("b", "id2")],
        )
        self.assertEqual(prefixes, ["dir1/", "dir2/"])

    @mock.patch('urllib3.PoolManager')
    def test_list_multi_page_size(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'GET',
                _list_uploads_url(
                    'delimiter=&max-uploads=2&prefix=multi&uploads=',
                ),
                {}, 200, content=NO_UPLOADS,
            ),
        )
        uploads, prefixes = _bucket(list_uploads_max=2).list_multi("multi")
        self.assertEqual(uploads, [])
        self.assertEqual(prefixes, [])

    @mock.patch('urllib3.PoolManager')
    def test_list_multi_continues_after_last_prefix(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'GET',
                _list_uploads_url(
                    'delimiter=%2F&max-uploads=1000&prefix=&uploads=',
                ),
                {}, 200,
                content='''<?xml version="1.0" encoding="UTF-8"?>
<ListMultipartUploadsResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/">
  <Bucket>sample</Bucket>
  <IsTruncated>true</IsTruncated>
  <CommonPrefixes><Prefix>dir1/</Prefix></CommonPrefixes>
</ListMultipartUploadsResult>''',
            ),
        )
        mock_server.mock_add_request(
            MockResponse(
                'GET',
                _list_uploads_url(
                    'delimiter=%2F&key-marker=dir1%2F&max-uploads=1000'
                    '&prefix=&upload-id-marker=&uploads=',
                ),
                {}, 200,
                content='''<?xml version="1.0" encoding="UTF-8"?>
<ListMultipartUploadsResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/">
  <Bucket>sample</Bucket>
  <IsTruncated>false</IsTruncated>
  <Upload><Key>e</Key><UploadId>id3</UploadId></Upload>
</ListMultipartUploadsResult>''',
            ),
        )
        uploads, prefixes = _bucket().list_multi(delimiter="/")
        self.assertEqual([multi.key for multi in uploads], ["e"])
        self.assertEqual(prefixes, ["dir1/"])
        self.assertEqual(len(mock_server.calls), 2)

    @mock.patch('urllib3.PoolManager')
    def test_list_multi_truncated_without_marker(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'GET',
                _list_uploads_url(
                    'delimiter=&max-uploads=1000&prefix=&uploads=',
                ),
                {}, 200,
                content='''<ListMultipartUploadsResult>
  <IsTruncated>true</IsTruncated>
</ListMultipartUploadsResult>''',
            ),
        )
        with self.assertRaises(InvalidResponseError):
            _bucket(min_attempts=3).list_multi()
        self.assertEqual(len(mock_server.calls), 1)

    @mock.patch('urllib3.PoolManager')
    def test_list_multi_non_xml_response(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'GET',
                _list_uploads_url(
                    'delimiter=&max-uploads=1000&prefix=&uploads=',
                ),
                {}, 200, response_headers={'Content-Type': 'text/html'},
                content='<html>proxy oops',
            ),
        )
        with self.assertRaises(InvalidResponseError) as ctx:
            _bucket().list_multi()
        self.assertEqual(ctx.exception.status_code, 200)


class PutPartTest(TestCase):
    @mock.patch('urllib3.PoolManager')
    def test_put_part(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'PUT', OBJECT_URL + '?partNumber=1&uploadId=' + UPLOAD_ID,
                {'Content-MD5': 'JvkO/RDWFPEAJS/1bYja2A==',
                 'Content-Length': '8',
                 'x-amz-content-sha256': sha256_hash(b"<part 1>")},
                200, response_headers={'ETag': '"etag1"'},
            ),
        )
        part = _multi().put_part(1, io.BytesIO(b"<part 1>"))
        self.assertEqual(part, Part(1, '"etag1"', 8))
        self.assertEqual(mock_server.calls[0][2], b"<part 1>")

    @mock.patch('urllib3.PoolManager')
    def test_put_part_rewinds_on_retry(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        url = OBJECT_URL + '?partNumber=2&uploadId=' + UPLOAD_ID
        mock_server.mock_add_request(
            MockResponse('PUT', url, {}, 500, content=_error("InternalError")),
        )
        mock_server.mock_add_request(
            MockResponse('PUT', url, {}, 200,
                         response_headers={'ETag': '"etag2"'}),
        )
        stream = io.BytesIO(b"<part 2>")
        stream.seek(0, io.SEEK_END)
        part = _multi(min_attempts=2).put_part_hash(
            2, stream, 8, "md5", sha256_hash(b"<part 2>"),
        )
        self.assertEqual(part.etag, '"etag2"')
        self.assertEqual(
            [call[2] for call in mock_server.calls],
            [b"<part 2>", b"<part 2>"],
        )

    @mock.patch('urllib3.PoolManager')
    def test_missing_etag_is_not_retried(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'PUT', OBJECT_URL + '?partNumber=1&uploadId=' + UPLOAD_ID,
                {}, 200,
            ),
        )
        with self.assertRaises(MissingETagError) as ctx:
            _multi(min_attempts=3).put_part(1, io.BytesIO(b"<part 1>"))
        self.assertEqual(ctx.exception.part_number, 1)
        self.assertEqual(len(mock_server.calls), 1)

    def test_unseekable_stream(self):
        stream = mock.Mock()
        stream.seek.side_effect = OSError("stream is not seekable")
        with self.assertRaises(RewindError):
            _multi().put_part_hash(1, stream, 8, "md5")

    def test_short_stream(self):
        self.assertRaises(
            ValueError,
            _multi().put_part_hash, 1, io.BytesIO(b"short"), 8, "md5",
        )

    def test_invalid_part_number(self):
        for part_number in [0, 10001]:
            with self.subTest(part_number=part_number):
                self.assertRaises(
                    ValueError,
                    _multi().put_part, part_number, io.BytesIO(b"data"),
                )


class ListPartsTest(TestCase):
    @mock.patch('urllib3.PoolManager')
    def test_list_parts_across_pages_after_transient_error(
            self, mock_connection,
    ):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'GET',
                OBJECT_URL + '?max-parts=2&uploadId=' + UPLOAD_ID,
                {'User-Agent': _DEFAULT_USER_AGENT}, 200,
                content='''<?xml version="1.0" encoding="UTF-8"?>
<ListPartsResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/">
  <Bucket>sample</Bucket>
  <Key>multi</Key>
  <NextPartNumberMarker>2</NextPartNumberMarker>
  <MaxParts>2</MaxParts>
  <IsTruncated>true</IsTruncated>
  <Part><PartNumber>2</PartNumber><ETag>"etag2"</ETag><Size>5</Size></Part>
  <Part><PartNumber>1</PartNumber><ETag>"etag1"</ETag><Size>5</Size></Part>
</ListPartsResult>''',
            ),
        )
        page2_url = (
            OBJECT_URL + '?max-parts=2&part-number-marker=2&uploadId=' +
            UPLOAD_ID
        )
        mock_server.mock_add_request(
            MockResponse('GET', page2_url, {}, 500,
                         content=_error("InternalError")),
        )
        mock_server.mock_add_request(
            MockResponse(
                'GET', page2_url, {}, 200,
                content='''<?xml version="1.0" encoding="UTF-8"?>
<ListPartsResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/">
  <Bucket>sample</Bucket>
  <Key>multi</Key>
  <IsTruncated>false</IsTruncated>
  <Part><PartNumber>3</PartNumber><ETag>"etag3"</ETag><Size>1</Size></Part>
</ListPartsResult>''',
            ),
        )
        parts = _multi(min_attempts=2, list_parts_max=2).list_parts()
        self.assertEqual([part.part_number for part in parts], [1, 2, 3])
        self.assertEqual(parts[0].etag, '"etag1"')
        self.assertEqual(len(mock_server.calls), 3)

    @mock.patch('urllib3.PoolManager')
    def test_list_parts_exhausted(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        url = OBJECT_URL + '?max-parts=1000&uploadId=' + UPLOAD_ID
        for _ in range(2):
            mock_server.mock_add_request(
                MockResponse('GET', url, {}, 503, content=_error("SlowDown")),
            )
        with self.assertRaises(S3Error) as ctx:
            _multi(min_attempts=2).list_parts()
        self.assertEqual(ctx.exception.code, "SlowDown")
        self.assertEqual(len(mock_server.calls), 2)

    @mock.patch('urllib3.PoolManager')
    def test_list_parts_non_xml_response(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'GET', OBJECT_URL + '?max-parts=1000&uploadId=' + UPLOAD_ID,
                {}, 200, content='not xml',
            ),
        )
        self.assertRaises(InvalidResponseError, _multi().list_parts)

    @mock.patch('urllib3.PoolManager')
    def test_list_parts_truncated_without_marker(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'GET', OBJECT_URL + '?max-parts=1000&uploadId=' + UPLOAD_ID,
                {}, 200,
                content='<ListPartsResult><IsTruncated>true</IsTruncated>'
                '</ListPartsResult>',
            ),
        )
        with self.assertRaises(InvalidResponseError):
            _multi(min_attempts=3).list_parts()
        self.assertEqual(len(mock_server.calls), 1)


class CompleteTest(TestCase):
    @mock.patch('urllib3.PoolManager')
    def test_complete_sorts_parts(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                'POST', UPLOAD_URL,
                {'Content-Type': 'application/xml'}, 200,
                content=COMPLETE_RESULT,
            ),
        )
        multi = _multi()
        result = multi.complete([
            Part(3, '"etag3"'), Part(1, '"etag1"'), Part(2, '"etag2"'),
        ])
        self.assertEqual(result.etag, '"3858f62230ac3c915f300c664312c11f-3"')
        self.assertEqual(multi.state, UploadState.COMPLETED)
        body = mock_server.calls[0][2].decode()
        self.assertLess(body.index('"etag1"'), body.index('"etag2"'))
        self.assertLess(body.index('"etag2"'), body.index('"etag3"'))

    @mock.patch('urllib3.PoolManager')
    def test_complete_retries_error_in_ok_response(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse('POST', UPLOAD_URL, {}, 200,
                         content=_error("InternalError")),
        )
        mock_server.mock_add_request(
            MockResponse('POST', UPLOAD_URL, {}, 200, content=COMPLETE_RESULT),
        )
        multi = _multi(min_attempts=2)
        multi.complete([Part(1, '"etag1"')])
        self.assertEqual(multi.state, UploadState.COMPLETED)
        self.assertEqual(len(mock_server.calls), 2)
        self.assertEqual(mock_server.calls[0][2], mock_server.calls[1][2])

    @mock.patch('urllib3.PoolManager')
    def test_complete_terminal_error_in_ok_response(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse('POST', UPLOAD_URL, {}, 200,
                         content=_error("InvalidPart")),
        )
        multi = _multi(min_attempts=3)
        with self.assertRaises(S3Error) as ctx:
            multi.complete([Part(1, '"etag1"')])
        self.assertEqual(ctx.exception.code, "InvalidPart")
        self.assertEqual(ctx.exception.bucket_name, "sample")
        self.assertEqual(ctx.exception.object_name, "multi")
        self.assertEqual(multi.state, UploadState.ACTIVE)
        self.assertEqual(len(mock_server.calls), 1)

    @mock.patch('urllib3.PoolManager')
    def test_complete_without_result_document(self, mock_connection):
        for content in [None, '<Foo><Bar/></Foo>', '<html>proxy oops']:
            with self.subTest(content=content):
                mock_server = MockConnection()
                mock_connection.return_value = mock_server
                mock_server.mock_add_request(
                    MockResponse('POST', UPLOAD_URL, {}, 200, content=content),
                )
                multi = _multi(min_attempts=3)
                with self.assertRaises(InvalidResponseError) as ctx:
                    multi.complete([Part(1, '"etag1"')])
                self.assertEqual(ctx.exception.status_code, 200)
                self.assertEqual(multi.state, UploadState.ACTIVE)
                self.assertEqual(len(mock_server.calls), 1)

    def test_complete_invalid_parts(self):
        multi = _multi()
        self.assertRaises(
            ValueError, multi.complete, [Part(1, "a"), Part(1, "b")],
        )
        self.assertEqual(multi.state, UploadState.ACTIVE)


class AbortTest(TestCase):
    @mock.patch('urllib3.PoolManager')
    def test_abort(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse('DELETE', UPLOAD_URL,
                         {'User-Agent': _DEFAULT_USER_AGENT}, 204),
        )
        multi = _multi()
        multi.abort()
        self.assertEqual(multi.state, UploadState.ABORTED)

    @mock.patch('urllib3.PoolManager')
    def test_repeated_abort(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse('DELETE', UPLOAD_URL, {}, 204),
        )
        mock_server.mock_add_request(
            MockResponse('DELETE', UPLOAD_URL, {}, 404,
                         content=_error("NoSuchUpload")),
        )
        multi = _multi()
        multi.abort()
        # Either outcome of a repeated abort is acceptable.
        try:
            multi.abort()
        except S3Error as exc:
            self.assertEqual(exc.code, "NoSuchUpload")
        self.assertEqual(multi.state, UploadState.ABORTED)

    @mock.patch('urllib3.PoolManager')
    def test_abort_connection_reset(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_error(ProtocolError("reset"))
        mock_server.mock_add_request(
            MockResponse('DELETE', UPLOAD_URL, {}, 204),
        )
        multi = _multi(min_attempts=2)
        multi.abort()
        self.assertEqual(multi.state, UploadState.ABORTED)
        self.assertEqual(len(mock_server.calls), 2)
