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
XML decoding and encoding helpers for S3 documents.

Responses are parsed with namespaces stripped from element tags, so
lookups use plain element names whichever namespace (if any) a server
puts on its documents.
"""

from __future__ import annotations

import io
from typing import Optional
from xml.etree import ElementTree as ET

S3_NAMESPACE = "http://s3.amazonaws.com/doc/2006-03-01/"


def fromstring(data: str | bytes) -> ET.Element:
    """Parse XML document and strip namespaces from all element tags."""
    root = ET.fromstring(data)
    for element in root.iter():
        if isinstance(element.tag, str) and element.tag.startswith("{"):
            element.tag = element.tag.split("}", 1)[1]
    return root


def find(
        element: ET.Element,
        name: str,
        strict: bool = False,
) -> Optional[ET.Element]:
    """ElementTree.Element.find() with strict flag."""
    elem = element.find(name)
    if strict and elem is None:
        raise ValueError(f"XML element <{name}> not found")
    return elem


def findall(element: ET.Element, name: str) -> list[ET.Element]:
    """ElementTree.Element.findall() returning a list."""
    return list(element.findall(name))


def findtext(
        element: ET.Element,
        name: str,
        strict: bool = False,
        default: Optional[str] = None,
) -> Optional[str]:
    """
    Text of the named child element; `default` if it does not exist,
    ValueError if it does not exist and `strict` is set.
    """
    elem = find(element, name, strict=strict)
    return default if elem is None else (elem.text or "")


def Element(  # pylint: disable=invalid-name
        tag: str,
        namespace: str = S3_NAMESPACE,
) -> ET.Element:
    """Create root ElementTree.Element with tag and namespace."""
    return ET.Element(tag, {"xmlns": namespace} if namespace else {})


def SubElement(  # pylint: disable=invalid-name
        parent: ET.Element, tag: str, text: Optional[str] = None,
) -> ET.Element:
    """Create ElementTree.SubElement on parent with tag and text."""
    element = ET.SubElement(parent, tag)
    if text is not None:
        element.text = text
    return element


def getbytes(element: ET.Element) -> bytes:
    """Serialize ElementTree.Element to bytes without XML declaration."""
    with io.BytesIO() as data:
        ET.ElementTree(element).write(
            data,
            encoding=None,
            xml_declaration=False,
        )
        return data.getvalue()
